"""Fulfillment service - staff-facing next action for won leads."""

import logging

from bookings.domain import (
    DEFERRED_INVOICE_NUMBER,
    PAYMENT_LINK_INVOICE_NUMBER,
    BookingForm,
    LeadId,
)
from bookings.domain.errors import (
    BookingFormNotFoundError,
    InvalidLeadIdError,
    InvoiceNumberRequiredError,
    LeadNotFoundError,
    PaymentLinkRequiredError,
)
from bookings.domain.fulfillment import FulfillmentStatus, evaluate
from bookings.stores.interfaces import FulfillmentStore

logger = logging.getLogger(__name__)


class FulfillmentService:
    """Service for post-sale fulfillment status."""

    def __init__(self, store: FulfillmentStore) -> None:
        self._store = store

    def get_status(self, lead_id: str) -> FulfillmentStatus:
        """Classify a lead from a freshly loaded snapshot.

        Raises:
            InvalidLeadIdError: If the lead_id is not a valid UUID.
            LeadNotFoundError: If the lead does not exist.
        """
        snapshot = self._store.get_snapshot(self._parse(lead_id))
        if snapshot is None:
            raise LeadNotFoundError(lead_id)
        return evaluate(snapshot)

    def record_invoice(
        self, lead_id: str, invoice_number: str = "", deferred: bool = False
    ) -> None:
        """Record an invoice number on the lead's booking form, or defer it.

        Raises:
            InvalidLeadIdError: If the lead_id is not a valid UUID.
            InvoiceNumberRequiredError: If neither a number nor deferral is given.
            LeadNotFoundError: If the lead does not exist.
            BookingFormNotFoundError: If the lead has no booking form yet.
        """
        parsed = self._parse(lead_id)
        number = invoice_number.strip()
        if not deferred and not number:
            raise InvoiceNumberRequiredError()

        form = self._current_form(parsed, lead_id)
        if deferred:
            self._store.update_invoice(form.id, DEFERRED_INVOICE_NUMBER, invoice_sent=False)
            logger.info("Invoice deferred for lead %s", lead_id)
        else:
            self._store.update_invoice(form.id, number, invoice_sent=True)
            logger.info("Invoice %s recorded for lead %s", number, lead_id)

    def record_payment_link(self, lead_id: str, payment_link: str) -> None:
        """Record that the customer was sent a card payment link instead of an invoice.

        Raises:
            InvalidLeadIdError: If the lead_id is not a valid UUID.
            PaymentLinkRequiredError: If the link is blank.
            LeadNotFoundError: If the lead does not exist.
            BookingFormNotFoundError: If the lead has no booking form yet.
        """
        parsed = self._parse(lead_id)
        link = payment_link.strip()
        if not link:
            raise PaymentLinkRequiredError()

        form = self._current_form(parsed, lead_id)
        self._store.update_payment_link(form.id, link, PAYMENT_LINK_INVOICE_NUMBER)
        logger.info("Payment link recorded for lead %s", lead_id)

    def _current_form(self, parsed: LeadId, lead_id: str) -> BookingForm:
        if not self._store.lead_exists(parsed):
            raise LeadNotFoundError(lead_id)
        form = self._store.get_current_form(parsed)
        if form is None:
            raise BookingFormNotFoundError()
        return form

    def _parse(self, lead_id: str) -> LeadId:
        try:
            return LeadId.from_string(lead_id)
        except ValueError:
            raise InvalidLeadIdError() from None
