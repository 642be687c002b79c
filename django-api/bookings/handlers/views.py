"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.cache import fulfillment_cache_key
from bookings.domain import LeadId, Submission
from bookings.domain.errors import DomainError, ErrorCode, InvalidLeadIdError
from bookings.handlers.serializers import (
    AssignmentSerializer,
    BookingFormSerializer,
    CourseStatusSerializer,
    CreateBookingFormSerializer,
    DelegateSerializer,
    DelegateStatusSerializer,
    FulfillmentStatusSerializer,
    InvoiceSerializer,
    PaymentLinkSerializer,
    SubmissionSerializer,
)
from bookings.services.booking_form_service import BookingFormService
from bookings.services.fulfillment_service import FulfillmentService
from bookings.stores.django_store import DjangoBookingFormStore, DjangoFulfillmentStore

ERROR_STATUS = {
    ErrorCode.INVALID_BOOKING_FORM_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_LEAD_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BOOKING_FORM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.LEAD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_FORM_ALREADY_SIGNED: status.HTTP_409_CONFLICT,
    ErrorCode.BOOKING_FORM_EXPIRED: status.HTTP_410_GONE,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message, "subject": error.subject},
        status=ERROR_STATUS.get(error.code, status.HTTP_422_UNPROCESSABLE_ENTITY),
    )


def booking_form_service() -> BookingFormService:
    return BookingFormService(DjangoBookingFormStore())


def fulfillment_service() -> FulfillmentService:
    return FulfillmentService(DjangoFulfillmentStore())


class BookingFormDetailView(APIView):
    """Handler for GET /api/booking-forms/{token}"""

    def get(self, request: Request, token: str) -> Response:
        try:
            form, state = booking_form_service().start(token)
        except DomainError as e:
            return error_response(e)

        data = BookingFormSerializer(form).data
        data["minimum_delegates"] = len(state.delegates)
        data["delegates"] = DelegateSerializer(state.delegates, many=True).data
        return Response(data)


class BookingFormCheckView(APIView):
    """Handler for POST /api/booking-forms/{token}/check"""

    def post(self, request: Request, token: str) -> Response:
        serializer = AssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            courses, delegates = booking_form_service().check_assignment(
                token, serializer.to_delegates()
            )
        except DomainError as e:
            return error_response(e)

        return Response(
            {
                "courses": CourseStatusSerializer(courses, many=True).data,
                "delegates": DelegateStatusSerializer(delegates, many=True).data,
            }
        )


class BookingFormSubmitView(APIView):
    """Handler for POST /api/booking-forms/{token}/submit"""

    def post(self, request: Request, token: str) -> Response:
        serializer = SubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = Submission(
            delegates=serializer.to_delegates(),
            signature_data=serializer.validated_data["signature_data"],
            agreed_to_terms=serializer.validated_data["agreed_to_terms"],
        )
        try:
            delegates = booking_form_service().submit(token, submission)
        except DomainError as e:
            return error_response(e)

        return Response(
            {"delegates": DelegateSerializer(delegates, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class LeadBookingFormView(APIView):
    """Handler for POST /api/leads/{lead_id}/booking-forms"""

    def post(self, request: Request, lead_id: str) -> Response:
        serializer = CreateBookingFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            form = booking_form_service().create_form(lead_id, serializer.to_courses())
        except DomainError as e:
            return error_response(e)

        return Response(BookingFormSerializer(form).data, status=status.HTTP_201_CREATED)


class LeadInvoiceView(APIView):
    """Handler for POST /api/leads/{lead_id}/invoice"""

    def post(self, request: Request, lead_id: str) -> Response:
        serializer = InvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            fulfillment_service().record_invoice(
                lead_id,
                invoice_number=serializer.validated_data["invoice_number"],
                deferred=serializer.validated_data["deferred"],
            )
        except DomainError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)


class LeadPaymentLinkView(APIView):
    """Handler for POST /api/leads/{lead_id}/payment-link"""

    def post(self, request: Request, lead_id: str) -> Response:
        serializer = PaymentLinkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            fulfillment_service().record_payment_link(
                lead_id, serializer.validated_data["payment_link"]
            )
        except DomainError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)


class LeadFulfillmentView(APIView):
    """Handler for GET /api/leads/{lead_id}/fulfillment"""

    def get(self, request: Request, lead_id: str) -> Response:
        try:
            key = fulfillment_cache_key(LeadId.from_string(lead_id))
        except ValueError:
            return error_response(InvalidLeadIdError())

        data = cache.get(key)
        if data is not None:
            return Response(data)

        try:
            result = fulfillment_service().get_status(lead_id)
        except DomainError as e:
            return error_response(e)

        data = FulfillmentStatusSerializer(result).data
        cache.set(key, data, timeout=settings.FULFILLMENT_CACHE_TIMEOUT)
        return Response(data)
