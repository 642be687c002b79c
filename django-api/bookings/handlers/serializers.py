"""Serializers for transforming domain models to and from API payloads."""

import uuid
from decimal import Decimal

from rest_framework import serializers

from bookings.domain import Course, CourseId, Delegate, DelegateCount, Money


class CourseSerializer(serializers.Serializer):
    """Serializer for Course domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    dates = serializers.CharField()
    venue = serializers.CharField()
    required_delegates = serializers.IntegerField(source="required_delegates.value")
    price = serializers.DecimalField(
        source="price.amount", max_digits=10, decimal_places=2, allow_null=True
    )
    currency = serializers.CharField(source="price.currency", allow_null=True)
    display_order = serializers.IntegerField()


class CourseInputSerializer(serializers.Serializer):
    """Input format for a quoted course placed on a new booking form."""

    name = serializers.CharField(max_length=255)
    dates = serializers.CharField(max_length=255, allow_blank=True, default="")
    venue = serializers.CharField(max_length=255, allow_blank=True, default="")
    number_of_delegates = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), allow_null=True, default=None
    )
    currency = serializers.RegexField(r"^[A-Z]{3}$", default="GBP")


class CreateBookingFormSerializer(serializers.Serializer):
    courses = CourseInputSerializer(many=True)

    def to_courses(self) -> list[Course]:
        return [
            _course_from(data, order)
            for order, data in enumerate(self.validated_data["courses"])
        ]


def _course_from(data: dict, display_order: int) -> Course:
    price = data.get("price")
    return Course(
        id=CourseId(uuid.uuid4()),
        name=data["name"],
        required_delegates=DelegateCount(data["number_of_delegates"]),
        dates=data["dates"],
        venue=data["venue"],
        price=Money(price, data["currency"]) if price is not None else None,
        display_order=display_order,
    )


class DelegateSerializer(serializers.Serializer):
    """Two-way serializer for a delegate being edited on the form.

    Blank fields are accepted here; completeness is a domain rule, checked by
    the assignment engine so the customer gets a precise message.
    """

    name = serializers.CharField(max_length=255, allow_blank=True, default="")
    national_insurance = serializers.CharField(max_length=20, allow_blank=True, default="")
    date_of_birth = serializers.DateField(allow_null=True, default=None)
    address = serializers.CharField(allow_blank=True, default="")
    postcode = serializers.CharField(max_length=20, allow_blank=True, default="")
    email = serializers.CharField(max_length=320, allow_blank=True, default="")
    phone = serializers.CharField(max_length=50, allow_blank=True, default="")
    selected_courses = serializers.ListField(child=serializers.UUIDField(), default=list)

    def to_representation(self, instance: Delegate) -> dict:
        return {
            "id": str(instance.id) if instance.id else None,
            "name": instance.name,
            "national_insurance": instance.national_insurance,
            "date_of_birth": instance.date_of_birth.isoformat() if instance.date_of_birth else None,
            "address": instance.address,
            "postcode": instance.postcode,
            "email": instance.email,
            "phone": instance.phone,
            "selected_courses": sorted(str(course_id) for course_id in instance.selected_courses),
        }


def to_delegate(data: dict) -> Delegate:
    return Delegate(
        name=data["name"],
        national_insurance=data["national_insurance"].upper(),
        date_of_birth=data["date_of_birth"],
        address=data["address"],
        postcode=data["postcode"].upper(),
        email=data["email"],
        phone=data["phone"],
        selected_courses=frozenset(CourseId(value) for value in data["selected_courses"]),
    )


class AssignmentSerializer(serializers.Serializer):
    delegates = DelegateSerializer(many=True)

    def to_delegates(self) -> tuple[Delegate, ...]:
        return tuple(to_delegate(data) for data in self.validated_data["delegates"])


class SubmissionSerializer(AssignmentSerializer):
    signature_data = serializers.CharField(allow_blank=True, default="")
    agreed_to_terms = serializers.BooleanField(default=False)


class BookingFormSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    token = serializers.CharField()
    status = serializers.CharField(source="status.value")
    expires_at = serializers.DateTimeField()
    courses = CourseSerializer(many=True)


class CourseStatusSerializer(serializers.Serializer):
    course_id = serializers.UUIDField(source="course_id.value")
    status = serializers.CharField(source="status.value")
    assigned = serializers.IntegerField()
    required = serializers.IntegerField()


class DelegateStatusSerializer(serializers.Serializer):
    index = serializers.IntegerField()
    missing_fields = serializers.ListField(child=serializers.CharField())
    has_course = serializers.BooleanField()
    complete = serializers.BooleanField()


class InvoiceSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=100, allow_blank=True, default="")
    deferred = serializers.BooleanField(default=False)


class PaymentLinkSerializer(serializers.Serializer):
    payment_link = serializers.URLField(max_length=500)


class FulfillmentStatusSerializer(serializers.Serializer):
    stage = serializers.CharField(source="stage.value")
    action = serializers.CharField(source="action.value")
    message_template = serializers.CharField(source="message_template.value", allow_null=True)
    bookings_created = serializers.IntegerField()
    courses_requiring_booking = serializers.IntegerField()
    remaining_bookings = serializers.IntegerField()
    can_resend_joining_instructions = serializers.BooleanField()
