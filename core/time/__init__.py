"""
POS Core Time — Public API
============================
Explicit clock protocol and temporal helpers.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
)
from core.time.temporal import (
    DateRange,
    expiry_from,
    is_past,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "DateRange",
    "expiry_from",
    "is_past",
]
