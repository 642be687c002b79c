from bookings.domain.models import (
    DEFERRED_INVOICE_NUMBER,
    PAYMENT_LINK_INVOICE_NUMBER,
    BookingForm,
    BookingFormState,
    Course,
    Delegate,
    FormStatus,
    FulfillmentSnapshot,
    Submission,
)
from bookings.domain.value_objects import (
    BookingFormId,
    CourseId,
    DelegateCount,
    DelegateId,
    LeadId,
    Money,
)

__all__ = [
    "BookingForm",
    "BookingFormState",
    "Course",
    "Delegate",
    "FormStatus",
    "FulfillmentSnapshot",
    "Submission",
    "DEFERRED_INVOICE_NUMBER",
    "PAYMENT_LINK_INVOICE_NUMBER",
    "LeadId",
    "BookingFormId",
    "CourseId",
    "DelegateId",
    "Money",
    "DelegateCount",
]
