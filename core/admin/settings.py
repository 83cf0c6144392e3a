"""
POS Admin — Shop Settings
===========================
The single AppSettings record: shop identity, contact details, the
default credit limit given to new customers, currency and bank details
printed on statements.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from core.primitives.values import require_minor_units

DEFAULT_CREDIT_LIMIT = 50000
DEFAULT_CURRENCY = "MVR"


@dataclass(frozen=True)
class AppSettings:
    shop_name: str = "My Shop"
    logo: str = ""
    island: str = ""
    country: str = ""
    contact_number: str = ""
    email: str = ""
    default_credit_limit: int = DEFAULT_CREDIT_LIMIT
    currency: str = DEFAULT_CURRENCY
    bank_details: str = ""

    def __post_init__(self):
        if not self.shop_name:
            raise ValueError("shop_name must be non-empty.")
        if not self.currency:
            raise ValueError("currency must be non-empty.")
        require_minor_units(self.default_credit_limit, "default_credit_limit")

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> AppSettings:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


SETTINGS_FIELDS = frozenset(f.name for f in fields(AppSettings))
