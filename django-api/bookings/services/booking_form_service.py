"""Booking form service - customer-facing form lifecycle.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from bookings.domain import (
    BookingForm,
    BookingFormId,
    BookingFormState,
    Course,
    CourseId,
    Delegate,
    DelegateId,
    LeadId,
    Submission,
)
from bookings.domain import assignment
from bookings.domain.assignment import CourseValidationStatus, DelegateStatus
from bookings.domain.errors import (
    BookingFormAlreadySignedError,
    BookingFormExpiredError,
    BookingFormNotFoundError,
    InvalidBookingFormTokenError,
    InvalidLeadIdError,
    LeadNotFoundError,
    SignatureRequiredError,
    TermsNotAcceptedError,
    ValidationRejectedError,
)
from bookings.stores.interfaces import BookingFormStore

logger = logging.getLogger(__name__)


class BookingFormService:
    """Service for issuing, filling in and submitting booking forms."""

    def __init__(self, store: BookingFormStore) -> None:
        self._store = store

    def create_form(self, lead_id: str, courses: Sequence[Course]) -> BookingForm:
        """Issue a new pending booking form for a lead.

        Raises:
            InvalidLeadIdError: If the lead_id is not a valid UUID.
            LeadNotFoundError: If the lead does not exist.
        """
        parsed = _parse_lead_id(lead_id)
        if not self._store.lead_exists(parsed):
            raise LeadNotFoundError(lead_id)

        expires_at = timezone.now() + timedelta(days=settings.BOOKING_FORM_EXPIRY_DAYS)
        form = self._store.create_form(parsed, str(uuid.uuid4()), expires_at, courses)
        logger.info(
            "Booking form %s issued for lead %s with %d course(s)",
            form.id, lead_id, len(form.courses),
        )
        return form

    def open_form(self, token: str) -> BookingForm:
        """Return a pending, unexpired booking form by its token.

        Raises:
            InvalidBookingFormTokenError: If the token is not a valid UUID.
            BookingFormNotFoundError: If no form has this token.
            BookingFormAlreadySignedError: If the form was already submitted.
            BookingFormExpiredError: If the token has expired.
        """
        try:
            uuid.UUID(token)
        except ValueError:
            raise InvalidBookingFormTokenError() from None

        form = self._store.get_form_by_token(token)
        if form is None:
            raise BookingFormNotFoundError()
        if form.is_signed:
            raise BookingFormAlreadySignedError()
        if form.is_expired(timezone.now()):
            raise BookingFormExpiredError()
        return form

    def start(self, token: str) -> tuple[BookingForm, BookingFormState]:
        """Open a form and return it with a blank state for the customer to fill in."""
        form = self.open_form(token)
        return form, assignment.start_form(form.courses)

    def check_assignment(
        self, token: str, delegates: Sequence[Delegate]
    ) -> tuple[list[CourseValidationStatus], list[DelegateStatus]]:
        """Live course and delegate statuses for an in-progress form."""
        form = self.open_form(token)
        state = BookingFormState(courses=form.courses, delegates=tuple(delegates))
        return assignment.course_statuses(state), assignment.delegate_statuses(state)

    def submit(self, token: str, submission: Submission) -> list[Delegate]:
        """Validate and persist a signed booking form.

        The assignment is always checked against the persisted roster, not
        whatever roster the client holds. Writes happen in this order: status
        flag, lead status, delegates, delegate course links. A failure part
        way through is not compensated; the signed flag blocks re-submission.

        Raises:
            ValidationRejectedError: For the first user-correctable problem found.
            Lookup errors from ``open_form``.
        """
        form = self.open_form(token)
        state = BookingFormState(courses=form.courses, delegates=submission.delegates)

        try:
            if not submission.agreed_to_terms:
                raise TermsNotAcceptedError()
            if not submission.signature_data.strip():
                raise SignatureRequiredError()
            assignment.validate_for_submission(state)
        except ValidationRejectedError as exc:
            logger.info("Booking form %s rejected: %s", form.id, exc.code.value)
            raise

        if not form.courses:
            # No roster, so any selection would link to a course that does not exist.
            delegates = [replace(d, selected_courses=frozenset()) for d in state.delegates]
        else:
            delegates = list(state.delegates)

        try:
            self._store.mark_signed(form.id, submission.signature_data, timezone.now())
            self._store.mark_lead_won(form.lead_id)
            saved = self._store.insert_delegates(form.id, delegates)
            links = [
                (delegate.id, course_id)
                for delegate in saved
                for course_id in sorted(delegate.selected_courses, key=str)
            ]
            self._store.insert_delegate_courses(links)
        except Exception:
            logger.exception("Failed to persist submission for booking form %s", form.id)
            raise

        logger.info(
            "Booking form %s signed with %d delegate(s)", form.id, len(saved)
        )
        return saved

    def get_assignment(self, form_id: BookingFormId) -> dict[DelegateId, frozenset[CourseId]]:
        """Which courses each persisted delegate attends, keyed by delegate id."""
        return {
            delegate.id: delegate.selected_courses
            for delegate in self._store.get_delegates(form_id)
        }


def _parse_lead_id(lead_id: str) -> LeadId:
    try:
        return LeadId.from_string(lead_id)
    except ValueError:
        raise InvalidLeadIdError() from None
