"""Domain models representing booking form and fulfillment state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from bookings.domain.value_objects import (
    BookingFormId,
    CourseId,
    DelegateCount,
    DelegateId,
    LeadId,
    Money,
)

# Invoice number recorded when staff choose to invoice later.
DEFERRED_INVOICE_NUMBER = "DEFERRED"
# Invoice number recorded when the customer pays through a card payment link.
PAYMENT_LINK_INVOICE_NUMBER = "STRIPE"


class FormStatus(str, Enum):
    """Transaction-level status flag of a booking form."""

    PENDING = "pending"
    SIGNED = "signed"


@dataclass(frozen=True)
class Course:
    """A purchased course seat block on a booking form roster."""

    id: CourseId
    name: str
    required_delegates: DelegateCount
    dates: str = ""
    venue: str = ""
    price: Money | None = None
    display_order: int = 0


@dataclass(frozen=True)
class Delegate:
    """A person attending one or more courses on a booking form."""

    name: str = ""
    national_insurance: str = ""
    date_of_birth: date | None = None
    address: str = ""
    postcode: str = ""
    email: str = ""
    phone: str = ""
    selected_courses: frozenset[CourseId] = frozenset()
    id: DelegateId | None = None


@dataclass(frozen=True)
class BookingFormState:
    """Serializable snapshot of a booking form being filled in.

    Courses keep roster order; delegates keep the order the customer sees.
    """

    courses: tuple[Course, ...]
    delegates: tuple[Delegate, ...] = ()

    def course(self, course_id: CourseId) -> Course | None:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None


@dataclass(frozen=True)
class BookingForm:
    """Domain representation of an issued booking form."""

    id: BookingFormId
    lead_id: LeadId
    token: str
    status: FormStatus
    expires_at: datetime
    created_at: datetime
    signed_at: datetime | None = None
    courses: tuple[Course, ...] = ()

    @property
    def is_signed(self) -> bool:
        return self.status is FormStatus.SIGNED

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now


@dataclass(frozen=True)
class Submission:
    """What the customer sends when signing a booking form."""

    delegates: tuple[Delegate, ...]
    signature_data: str
    agreed_to_terms: bool


@dataclass(frozen=True)
class FulfillmentSnapshot:
    """Read-only projection of the persisted facts for one won lead.

    Rebuilt from the underlying records every time it is classified.
    """

    form_status: FormStatus | None = None
    invoice_number: str = ""
    invoice_sent: bool = False
    payment_link_sent: bool = False
    bookings_created: int = 0
    courses_requiring_booking: int = 1
    joining_instructions_sent: bool = False

    @property
    def form_exists(self) -> bool:
        return self.form_status is not None

    @property
    def form_signed(self) -> bool:
        return self.form_status is FormStatus.SIGNED

    @property
    def invoice_deferred(self) -> bool:
        return self.invoice_number.strip() == DEFERRED_INVOICE_NUMBER

    @property
    def has_invoice_number(self) -> bool:
        number = self.invoice_number.strip()
        return bool(number) and number != DEFERRED_INVOICE_NUMBER

    @property
    def invoice_submitted(self) -> bool:
        # Any one of these unblocks booking creation.
        return (
            self.has_invoice_number
            or self.invoice_deferred
            or self.invoice_sent
            or self.payment_link_sent
        )

    @property
    def all_bookings_created(self) -> bool:
        return self.bookings_created >= self.courses_requiring_booking

    @property
    def remaining_bookings(self) -> int:
        return max(0, self.courses_requiring_booking - self.bookings_created)
