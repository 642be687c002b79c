"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_BOOKING_FORM_TOKEN = "INVALID_BOOKING_FORM_TOKEN"
    BOOKING_FORM_NOT_FOUND = "BOOKING_FORM_NOT_FOUND"
    BOOKING_FORM_EXPIRED = "BOOKING_FORM_EXPIRED"
    BOOKING_FORM_ALREADY_SIGNED = "BOOKING_FORM_ALREADY_SIGNED"
    INVALID_LEAD_ID = "INVALID_LEAD_ID"
    LEAD_NOT_FOUND = "LEAD_NOT_FOUND"
    DELEGATE_MINIMUM_REACHED = "DELEGATE_MINIMUM_REACHED"
    DELEGATE_INCOMPLETE = "DELEGATE_INCOMPLETE"
    DELEGATE_WITHOUT_COURSE = "DELEGATE_WITHOUT_COURSE"
    UNKNOWN_COURSE_SELECTED = "UNKNOWN_COURSE_SELECTED"
    COURSE_ASSIGNMENT_MISMATCH = "COURSE_ASSIGNMENT_MISMATCH"
    SIGNATURE_REQUIRED = "SIGNATURE_REQUIRED"
    TERMS_NOT_ACCEPTED = "TERMS_NOT_ACCEPTED"
    INVOICE_NUMBER_REQUIRED = "INVOICE_NUMBER_REQUIRED"
    PAYMENT_LINK_REQUIRED = "PAYMENT_LINK_REQUIRED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message.

    ``subject`` names the delegate or course the error is about, when there is one.
    """

    code: ErrorCode
    message: str
    subject: str | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidBookingFormTokenError(DomainError):
    """Raised when a booking form token is not a valid UUID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_FORM_TOKEN,
            message="Invalid booking form token",
        )


class BookingFormNotFoundError(DomainError):
    """Raised when no booking form matches a token or lead."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_FORM_NOT_FOUND,
            message="Booking form not found",
        )


class BookingFormExpiredError(DomainError):
    """Raised when a pending booking form's token has expired."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_FORM_EXPIRED,
            message="This booking form has expired",
        )


class BookingFormAlreadySignedError(DomainError):
    """Raised when a signed booking form is opened or submitted again."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_FORM_ALREADY_SIGNED,
            message="This form has already been submitted",
        )


class InvalidLeadIdError(DomainError):
    """Raised when a lead ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_LEAD_ID,
            message="Invalid lead ID format",
        )


class LeadNotFoundError(DomainError):
    """Raised when a lead is not found."""

    def __init__(self, lead_id: str) -> None:
        super().__init__(
            code=ErrorCode.LEAD_NOT_FOUND,
            message="Lead not found",
            subject=lead_id,
        )


class ValidationRejectedError(DomainError):
    """User-correctable rejection of a booking form edit or submission."""


class DelegateMinimumError(ValidationRejectedError):
    """Raised when the delegate list is, or would become, too short to fill a course."""

    def __init__(self, minimum: int) -> None:
        super().__init__(
            code=ErrorCode.DELEGATE_MINIMUM_REACHED,
            message=f"At least {minimum} delegate(s) are required for this booking",
        )


class IncompleteDelegateError(ValidationRejectedError):
    """Raised when a delegate is missing required personal details."""

    def __init__(self, label: str, missing: list[str]) -> None:
        super().__init__(
            code=ErrorCode.DELEGATE_INCOMPLETE,
            message=f"Please complete all fields for {label}: {', '.join(missing)}",
            subject=label,
        )


class DelegateWithoutCourseError(ValidationRejectedError):
    """Raised when a delegate has not been assigned to any course."""

    def __init__(self, label: str) -> None:
        super().__init__(
            code=ErrorCode.DELEGATE_WITHOUT_COURSE,
            message=f"Please select at least one course for {label}",
            subject=label,
        )


class UnknownCourseSelectedError(ValidationRejectedError):
    """Raised when a delegate selected a course that is not on the roster."""

    def __init__(self, label: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_COURSE_SELECTED,
            message=f"{label} has selected a course that is not part of this booking",
            subject=label,
        )


class CourseAssignmentError(ValidationRejectedError):
    """Raised when a course's assigned delegates do not match its seats exactly."""

    def __init__(self, course_name: str, assigned: int, required: int) -> None:
        super().__init__(
            code=ErrorCode.COURSE_ASSIGNMENT_MISMATCH,
            message=(
                f"{course_name} requires exactly {required} delegate(s), "
                f"{assigned} assigned"
            ),
            subject=course_name,
        )


class SignatureRequiredError(ValidationRejectedError):
    """Raised when a submission carries no signature image."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SIGNATURE_REQUIRED,
            message="Please provide your signature",
        )


class TermsNotAcceptedError(ValidationRejectedError):
    """Raised when the customer has not agreed to the terms and conditions."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TERMS_NOT_ACCEPTED,
            message="Please agree to the terms and conditions",
        )


class InvoiceNumberRequiredError(ValidationRejectedError):
    """Raised when an invoice is recorded without a number and not deferred."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVOICE_NUMBER_REQUIRED,
            message="Please enter an invoice number or defer the invoice",
        )


class PaymentLinkRequiredError(ValidationRejectedError):
    """Raised when a payment link is recorded without a URL."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_LINK_REQUIRED,
            message="Please enter a payment link",
        )
