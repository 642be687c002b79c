from django.urls import path

from bookings.handlers import (
    BookingFormCheckView,
    BookingFormDetailView,
    BookingFormSubmitView,
    LeadBookingFormView,
    LeadFulfillmentView,
    LeadInvoiceView,
    LeadPaymentLinkView,
)

urlpatterns = [
    path("booking-forms/<str:token>", BookingFormDetailView.as_view(), name="booking-form-detail"),
    path(
        "booking-forms/<str:token>/check",
        BookingFormCheckView.as_view(),
        name="booking-form-check",
    ),
    path(
        "booking-forms/<str:token>/submit",
        BookingFormSubmitView.as_view(),
        name="booking-form-submit",
    ),
    path(
        "leads/<str:lead_id>/booking-forms",
        LeadBookingFormView.as_view(),
        name="lead-booking-forms",
    ),
    path("leads/<str:lead_id>/invoice", LeadInvoiceView.as_view(), name="lead-invoice"),
    path(
        "leads/<str:lead_id>/payment-link",
        LeadPaymentLinkView.as_view(),
        name="lead-payment-link",
    ),
    path(
        "leads/<str:lead_id>/fulfillment",
        LeadFulfillmentView.as_view(),
        name="lead-fulfillment",
    ),
]
