"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in bookings/domain/.
"""

import uuid

from django.db import models


class Lead(models.Model):
    """Persistence model for a sales lead (one transaction)."""

    class Status(models.TextChoices):
        NEW = "new", "New"
        CONTACTED = "contacted", "Contacted"
        QUOTED = "quoted", "Quoted"
        WON = "won", "Won"
        LOST = "lost", "Lost"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    company_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class BookingForm(models.Model):
    """Persistence model for a booking form sent to a customer."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SIGNED = "signed", "Signed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name="booking_forms")
    token = models.UUIDField(unique=True, default=uuid.uuid4)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    expires_at = models.DateTimeField()
    signature_data = models.TextField(blank=True)
    signed_at = models.DateTimeField(blank=True, null=True)
    invoice_number = models.CharField(max_length=100, blank=True)
    invoice_sent = models.BooleanField(default=False)
    payment_link = models.URLField(max_length=500, blank=True)
    payment_link_sent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["lead", "-created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.lead.name} - {self.status}"


class BookingFormCourse(models.Model):
    """Persistence model for one course on a booking form roster."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking_form = models.ForeignKey(
        BookingForm, on_delete=models.CASCADE, related_name="courses"
    )
    name = models.CharField(max_length=255)
    dates = models.CharField(max_length=255, blank=True)
    venue = models.CharField(max_length=255, blank=True)
    number_of_delegates = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    currency = models.CharField(max_length=3, default="GBP")
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order"]

    def __str__(self) -> str:
        return self.name


class BookingFormDelegate(models.Model):
    """Persistence model for a delegate submitted on a booking form."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking_form = models.ForeignKey(
        BookingForm, on_delete=models.CASCADE, related_name="delegates"
    )
    name = models.CharField(max_length=255)
    email = models.CharField(max_length=320, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    national_insurance = models.CharField(max_length=20)
    date_of_birth = models.DateField()
    address = models.TextField()
    postcode = models.CharField(max_length=20)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position"]

    def __str__(self) -> str:
        return self.name


class DelegateCourse(models.Model):
    """Link row: a delegate attends a course."""

    delegate = models.ForeignKey(
        BookingFormDelegate, on_delete=models.CASCADE, related_name="course_links"
    )
    course = models.ForeignKey(
        BookingFormCourse, on_delete=models.CASCADE, related_name="delegate_links"
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["delegate", "course"], name="unique_delegate_course"),
        ]


class Booking(models.Model):
    """Persistence model for a confirmed course booking created by staff."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name="bookings")
    course = models.ForeignKey(
        BookingFormCourse,
        on_delete=models.SET_NULL,
        related_name="bookings",
        blank=True,
        null=True,
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
    invoice_no = models.CharField(max_length=100, blank=True)
    joining_instructions_sent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["lead", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.lead.name} - {self.status}"
