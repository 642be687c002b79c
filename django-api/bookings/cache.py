"""Cache keys shared by views and signal receivers."""

from uuid import UUID

from bookings.domain import LeadId


def fulfillment_cache_key(lead_id: LeadId | UUID) -> str:
    # Keyed on the canonical UUID text so every spelling of an id shares one entry.
    return f"leads:{lead_id}:fulfillment"
