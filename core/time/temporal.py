"""
POS Core Time — Temporal Helpers
==================================
Pure functions for expiry and date-range logic.
All functions take explicit datetime arguments — no hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class DateRange:
    """
    A closed calendar range [start, end] used by statements and reports.

    Invariant: start <= end (enforced at construction).
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"DateRange start ({self.start}) must be <= end ({self.end})."
            )

    def contains(self, value) -> bool:
        """Inclusive on both ends; datetimes are compared by their date."""
        if isinstance(value, datetime):
            value = value.date()
        return self.start <= value <= self.end


def expiry_from(issued_at: datetime, ttl_seconds: int) -> datetime:
    return issued_at + timedelta(seconds=ttl_seconds)


def is_past(deadline: datetime, now: datetime) -> bool:
    """True once now is strictly after the deadline."""
    return now > deadline
