"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Each write is a single
attempt; failures propagate to the caller.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from bookings.domain import (
    BookingForm,
    BookingFormId,
    Course,
    CourseId,
    Delegate,
    DelegateId,
    FulfillmentSnapshot,
    LeadId,
)


class BookingFormStore(ABC):
    """Interface for booking form persistence operations."""

    @abstractmethod
    def lead_exists(self, lead_id: LeadId) -> bool:
        """Check if a lead exists."""
        ...

    @abstractmethod
    def create_form(
        self,
        lead_id: LeadId,
        token: str,
        expires_at: datetime,
        courses: Sequence[Course],
    ) -> BookingForm:
        """Create a pending booking form with its course roster."""
        ...

    @abstractmethod
    def get_form_by_token(self, token: str) -> BookingForm | None:
        """Return a booking form with its roster, or None if not found."""
        ...

    @abstractmethod
    def mark_signed(
        self, form_id: BookingFormId, signature_data: str, signed_at: datetime
    ) -> None:
        """Flip the form's status flag to signed and store the signature."""
        ...

    @abstractmethod
    def mark_lead_won(self, lead_id: LeadId) -> None:
        """Set the lead's status to won."""
        ...

    @abstractmethod
    def insert_delegates(
        self, form_id: BookingFormId, delegates: Sequence[Delegate]
    ) -> list[Delegate]:
        """Bulk-insert delegates in order and return them with ids assigned."""
        ...

    @abstractmethod
    def insert_delegate_courses(
        self, links: Sequence[tuple[DelegateId, CourseId]]
    ) -> None:
        """Bulk-insert delegate x course link rows."""
        ...

    @abstractmethod
    def get_delegates(self, form_id: BookingFormId) -> list[Delegate]:
        """Return all persisted delegates for a form with their selected courses."""
        ...


class FulfillmentStore(ABC):
    """Interface for the facts the fulfillment state machine reads."""

    @abstractmethod
    def lead_exists(self, lead_id: LeadId) -> bool:
        """Check if a lead exists."""
        ...

    @abstractmethod
    def get_snapshot(self, lead_id: LeadId) -> FulfillmentSnapshot | None:
        """Return the lead's fulfillment snapshot, or None if the lead does not exist."""
        ...

    @abstractmethod
    def get_current_form(self, lead_id: LeadId) -> BookingForm | None:
        """Return the form that represents the lead: signed before pending, then newest."""
        ...

    @abstractmethod
    def update_invoice(self, form_id: BookingFormId, invoice_number: str, invoice_sent: bool) -> None:
        """Record invoice details on a booking form."""
        ...

    @abstractmethod
    def update_payment_link(
        self, form_id: BookingFormId, payment_link: str, invoice_number: str
    ) -> None:
        """Record that a payment link was sent in place of an invoice."""
        ...
