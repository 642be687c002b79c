"""Post-sale fulfillment state machine.

Classifies a ``FulfillmentSnapshot`` into exactly one stage. The stages are
tried in the order of ``STAGE_RULES`` and the first matching predicate wins, so
inconsistent combinations of facts (a booking created before the invoice was
recorded, for instance) still produce a single next step. Nothing here mutates
state; callers re-classify after every external effect.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bookings.domain.models import FormStatus, FulfillmentSnapshot


class FulfillmentStage(str, Enum):
    COMPLETED = "completed"
    AWAITING_JOINING_INSTRUCTIONS = "awaiting_joining_instructions"
    AWAITING_BOOKING_CREATION = "awaiting_booking_creation"
    AWAITING_INVOICE = "awaiting_invoice"
    AWAITING_SIGNATURE = "awaiting_signature"
    AWAITING_FORM_CREATION = "awaiting_form_creation"


class NextAction(str, Enum):
    RESEND_JOINING_INSTRUCTIONS = "resend_joining_instructions"
    SEND_JOINING_INSTRUCTIONS = "send_joining_instructions"
    CREATE_BOOKING = "create_booking"
    SEND_INVOICE = "send_invoice"
    RESEND_BOOKING_FORM = "resend_booking_form"
    CREATE_BOOKING_FORM = "create_booking_form"


class MessageTemplate(str, Enum):
    BOOKING_FORM_LINK = "booking_form_link"
    INVOICE_CONFIRMATION = "invoice_confirmation"
    JOINING_INSTRUCTIONS = "joining_instructions"


Predicate = Callable[[FulfillmentSnapshot], bool]


def is_completed(snapshot: FulfillmentSnapshot) -> bool:
    return snapshot.all_bookings_created and snapshot.joining_instructions_sent


def is_awaiting_joining_instructions(snapshot: FulfillmentSnapshot) -> bool:
    return (
        snapshot.all_bookings_created
        and snapshot.has_invoice_number
        and not snapshot.joining_instructions_sent
    )


def is_awaiting_booking_creation(snapshot: FulfillmentSnapshot) -> bool:
    return (
        snapshot.form_signed
        and snapshot.invoice_submitted
        and not snapshot.all_bookings_created
    )


def is_awaiting_invoice(snapshot: FulfillmentSnapshot) -> bool:
    return snapshot.form_signed and not snapshot.invoice_submitted


def is_awaiting_signature(snapshot: FulfillmentSnapshot) -> bool:
    return snapshot.form_status is FormStatus.PENDING


def is_awaiting_form_creation(snapshot: FulfillmentSnapshot) -> bool:
    return not snapshot.form_exists


# Evaluated top-down; order is priority.
STAGE_RULES: tuple[tuple[Predicate, FulfillmentStage], ...] = (
    (is_completed, FulfillmentStage.COMPLETED),
    (is_awaiting_joining_instructions, FulfillmentStage.AWAITING_JOINING_INSTRUCTIONS),
    (is_awaiting_booking_creation, FulfillmentStage.AWAITING_BOOKING_CREATION),
    (is_awaiting_invoice, FulfillmentStage.AWAITING_INVOICE),
    (is_awaiting_signature, FulfillmentStage.AWAITING_SIGNATURE),
    (is_awaiting_form_creation, FulfillmentStage.AWAITING_FORM_CREATION),
)

# Signed form, invoice deferred or marked sent without a number, everything
# booked: a real invoice number has to be recorded before joining instructions.
FALLBACK_STAGE = FulfillmentStage.AWAITING_INVOICE

STAGE_ACTIONS: dict[FulfillmentStage, tuple[NextAction, MessageTemplate | None]] = {
    FulfillmentStage.COMPLETED: (
        NextAction.RESEND_JOINING_INSTRUCTIONS,
        MessageTemplate.JOINING_INSTRUCTIONS,
    ),
    FulfillmentStage.AWAITING_JOINING_INSTRUCTIONS: (
        NextAction.SEND_JOINING_INSTRUCTIONS,
        MessageTemplate.JOINING_INSTRUCTIONS,
    ),
    FulfillmentStage.AWAITING_BOOKING_CREATION: (NextAction.CREATE_BOOKING, None),
    FulfillmentStage.AWAITING_INVOICE: (
        NextAction.SEND_INVOICE,
        MessageTemplate.INVOICE_CONFIRMATION,
    ),
    FulfillmentStage.AWAITING_SIGNATURE: (
        NextAction.RESEND_BOOKING_FORM,
        MessageTemplate.BOOKING_FORM_LINK,
    ),
    FulfillmentStage.AWAITING_FORM_CREATION: (
        NextAction.CREATE_BOOKING_FORM,
        MessageTemplate.BOOKING_FORM_LINK,
    ),
}


@dataclass(frozen=True)
class FulfillmentStatus:
    """The single call-to-action shown to staff for a won lead."""

    stage: FulfillmentStage
    action: NextAction
    message_template: MessageTemplate | None
    bookings_created: int
    courses_requiring_booking: int
    remaining_bookings: int

    @property
    def can_resend_joining_instructions(self) -> bool:
        return self.stage is FulfillmentStage.COMPLETED


def classify(snapshot: FulfillmentSnapshot) -> FulfillmentStage:
    for predicate, stage in STAGE_RULES:
        if predicate(snapshot):
            return stage
    return FALLBACK_STAGE


def evaluate(snapshot: FulfillmentSnapshot) -> FulfillmentStatus:
    stage = classify(snapshot)
    action, template = STAGE_ACTIONS[stage]
    return FulfillmentStatus(
        stage=stage,
        action=action,
        message_template=template,
        bookings_created=snapshot.bookings_created,
        courses_requiring_booking=snapshot.courses_requiring_booking,
        remaining_bookings=snapshot.remaining_bookings,
    )
