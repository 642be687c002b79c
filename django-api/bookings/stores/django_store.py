"""Django ORM implementation of the booking stores."""

from collections.abc import Sequence
from datetime import datetime

from bookings import models
from bookings.domain import (
    BookingForm,
    BookingFormId,
    Course,
    CourseId,
    Delegate,
    DelegateCount,
    DelegateId,
    FormStatus,
    FulfillmentSnapshot,
    LeadId,
    Money,
)
from bookings.stores.interfaces import BookingFormStore, FulfillmentStore


def _to_course(row: models.BookingFormCourse) -> Course:
    price = Money(amount=row.price, currency=row.currency) if row.price is not None else None
    return Course(
        id=CourseId(row.id),
        name=row.name,
        required_delegates=DelegateCount(row.number_of_delegates),
        dates=row.dates,
        venue=row.venue,
        price=price,
        display_order=row.display_order,
    )


def _to_form(row: models.BookingForm) -> BookingForm:
    return BookingForm(
        id=BookingFormId(row.id),
        lead_id=LeadId(row.lead_id),
        token=str(row.token),
        status=FormStatus(row.status),
        expires_at=row.expires_at,
        created_at=row.created_at,
        signed_at=row.signed_at,
        courses=tuple(_to_course(course) for course in row.courses.all()),
    )


def _current_form_row(lead_id: LeadId) -> models.BookingForm | None:
    # Signed forms take priority over pending ones; otherwise the newest wins.
    forms = models.BookingForm.objects.filter(lead_id=lead_id.value).order_by("-created_at")
    return forms.filter(status=models.BookingForm.Status.SIGNED).first() or forms.first()


class DjangoBookingFormStore(BookingFormStore):
    """PostgreSQL-backed booking form store using Django ORM."""

    def lead_exists(self, lead_id: LeadId) -> bool:
        return models.Lead.objects.filter(id=lead_id.value).exists()

    def create_form(
        self,
        lead_id: LeadId,
        token: str,
        expires_at: datetime,
        courses: Sequence[Course],
    ) -> BookingForm:
        row = models.BookingForm.objects.create(
            lead_id=lead_id.value, token=token, expires_at=expires_at
        )
        models.BookingFormCourse.objects.bulk_create(
            models.BookingFormCourse(
                id=course.id.value,
                booking_form=row,
                name=course.name,
                dates=course.dates,
                venue=course.venue,
                number_of_delegates=course.required_delegates.value,
                price=course.price.amount if course.price else None,
                currency=course.price.currency if course.price else "GBP",
                display_order=course.display_order,
            )
            for course in courses
        )
        return _to_form(row)

    def get_form_by_token(self, token: str) -> BookingForm | None:
        row = (
            models.BookingForm.objects.filter(token=token)
            .prefetch_related("courses")
            .first()
        )
        return _to_form(row) if row else None

    def mark_signed(
        self, form_id: BookingFormId, signature_data: str, signed_at: datetime
    ) -> None:
        # save() rather than update() so change subscribers are notified.
        row = models.BookingForm.objects.get(id=form_id.value)
        row.status = models.BookingForm.Status.SIGNED
        row.signature_data = signature_data
        row.signed_at = signed_at
        row.save(update_fields=["status", "signature_data", "signed_at", "updated_at"])

    def mark_lead_won(self, lead_id: LeadId) -> None:
        lead = models.Lead.objects.get(id=lead_id.value)
        lead.status = models.Lead.Status.WON
        lead.save(update_fields=["status", "updated_at"])

    def insert_delegates(
        self, form_id: BookingFormId, delegates: Sequence[Delegate]
    ) -> list[Delegate]:
        rows = models.BookingFormDelegate.objects.bulk_create(
            models.BookingFormDelegate(
                booking_form_id=form_id.value,
                name=delegate.name,
                email=delegate.email,
                phone=delegate.phone,
                national_insurance=delegate.national_insurance,
                date_of_birth=delegate.date_of_birth,
                address=delegate.address,
                postcode=delegate.postcode,
                position=position,
            )
            for position, delegate in enumerate(delegates)
        )
        # Ids are generated client-side, so they are set even without RETURNING.
        return [
            Delegate(
                id=DelegateId(row.id),
                name=delegate.name,
                national_insurance=delegate.national_insurance,
                date_of_birth=delegate.date_of_birth,
                address=delegate.address,
                postcode=delegate.postcode,
                email=delegate.email,
                phone=delegate.phone,
                selected_courses=delegate.selected_courses,
            )
            for row, delegate in zip(rows, delegates)
        ]

    def insert_delegate_courses(
        self, links: Sequence[tuple[DelegateId, CourseId]]
    ) -> None:
        models.DelegateCourse.objects.bulk_create(
            models.DelegateCourse(delegate_id=delegate_id.value, course_id=course_id.value)
            for delegate_id, course_id in links
        )

    def get_delegates(self, form_id: BookingFormId) -> list[Delegate]:
        rows = models.BookingFormDelegate.objects.filter(
            booking_form_id=form_id.value
        ).prefetch_related("course_links")
        return [
            Delegate(
                id=DelegateId(row.id),
                name=row.name,
                national_insurance=row.national_insurance,
                date_of_birth=row.date_of_birth,
                address=row.address,
                postcode=row.postcode,
                email=row.email,
                phone=row.phone,
                selected_courses=frozenset(
                    CourseId(link.course_id) for link in row.course_links.all()
                ),
            )
            for row in rows
        ]


class DjangoFulfillmentStore(FulfillmentStore):
    """Builds fulfillment snapshots from booking forms and bookings."""

    def lead_exists(self, lead_id: LeadId) -> bool:
        return models.Lead.objects.filter(id=lead_id.value).exists()

    def get_snapshot(self, lead_id: LeadId) -> FulfillmentSnapshot | None:
        if not self.lead_exists(lead_id):
            return None

        form = _current_form_row(lead_id)
        bookings = list(
            models.Booking.objects.filter(lead_id=lead_id.value).exclude(
                status=models.Booking.Status.CANCELLED
            )
        )
        booked_invoice = next(
            (booking.invoice_no for booking in bookings if booking.invoice_no.strip()), ""
        )

        if form is None:
            return FulfillmentSnapshot(
                invoice_number=booked_invoice,
                bookings_created=len(bookings),
                joining_instructions_sent=any(b.joining_instructions_sent for b in bookings),
            )

        return FulfillmentSnapshot(
            form_status=FormStatus(form.status),
            invoice_number=booked_invoice or form.invoice_number,
            invoice_sent=form.invoice_sent,
            payment_link_sent=form.payment_link_sent,
            bookings_created=len(bookings),
            courses_requiring_booking=form.courses.count() or 1,
            joining_instructions_sent=any(b.joining_instructions_sent for b in bookings),
        )

    def get_current_form(self, lead_id: LeadId) -> BookingForm | None:
        row = _current_form_row(lead_id)
        return _to_form(row) if row else None

    def update_invoice(self, form_id: BookingFormId, invoice_number: str, invoice_sent: bool) -> None:
        row = models.BookingForm.objects.get(id=form_id.value)
        row.invoice_number = invoice_number
        row.invoice_sent = invoice_sent
        row.save(update_fields=["invoice_number", "invoice_sent", "updated_at"])

    def update_payment_link(
        self, form_id: BookingFormId, payment_link: str, invoice_number: str
    ) -> None:
        row = models.BookingForm.objects.get(id=form_id.value)
        row.payment_link = payment_link
        row.payment_link_sent = True
        row.invoice_sent = True
        row.invoice_number = invoice_number
        row.save(
            update_fields=[
                "payment_link",
                "payment_link_sent",
                "invoice_sent",
                "invoice_number",
                "updated_at",
            ]
        )
