"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self
from uuid import UUID

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
    "PLN": "zł",
}


@dataclass(frozen=True)
class LeadId:
    """Unique identifier for a Lead (one sales transaction)."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BookingFormId:
    """Unique identifier for a BookingForm."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CourseId:
    """Unique identifier for a Course on a booking form roster."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DelegateId:
    """Unique identifier for a persisted Delegate."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal
    currency: str = "GBP"

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if len(self.currency) != 3 or not self.currency.isupper():
            raise ValueError("Currency must be a three letter ISO code")

    def __str__(self) -> str:
        symbol = CURRENCY_SYMBOLS.get(self.currency, self.currency)
        return f"{symbol} {self.amount:.2f}"


@dataclass(frozen=True)
class DelegateCount:
    """Positive number of delegates a course seat block requires."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Delegate count must be at least 1")
