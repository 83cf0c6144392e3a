"""
POS Value Helpers — Money and Timestamps
==========================================
All currency amounts are integer minor units (laari, cents). No floats
ever cross an engine boundary.

Timestamps are timezone-aware datetimes in memory and ISO-8601 strings
in serialized snapshots.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def require_minor_units(value, field_name: str, *, allow_negative: bool = False) -> None:
    """Raise ValueError unless value is an int amount in minor units."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"{field_name} must be int (minor units), "
            f"got {type(value).__name__}."
        )
    if not allow_negative and value < 0:
        raise ValueError(f"{field_name} must be >= 0.")


def percent_of(amount: int, percent: int) -> int:
    """
    percent% of amount, rounded half-up to the minor unit.

    percent_of(5000, 8) == 400; percent_of(1, 50) == 1.
    """
    return (amount * percent + 50) // 100


def format_minor(amount: int, currency: str = "") -> str:
    """1050 → '10.50' (prefixed with currency when given)."""
    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 100)
    text = f"{sign}{whole}.{fraction:02d}"
    return f"{currency} {text}" if currency else text


def dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def dt_from_str(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
