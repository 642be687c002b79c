from bookings.handlers.views import (
    BookingFormCheckView,
    BookingFormDetailView,
    BookingFormSubmitView,
    LeadBookingFormView,
    LeadFulfillmentView,
    LeadInvoiceView,
    LeadPaymentLinkView,
)

__all__ = [
    "BookingFormDetailView",
    "BookingFormCheckView",
    "BookingFormSubmitView",
    "LeadBookingFormView",
    "LeadInvoiceView",
    "LeadPaymentLinkView",
    "LeadFulfillmentView",
]
