"""
POS Auth — Password Digests
=============================
Passwords are stored as SHA-256 hex digests, never as plain text.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional


def _ensure_string(value, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string.")
    return value


def hash_password(password: str) -> str:
    secret = _ensure_string(password, field_name="password")
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    return hmac.compare_digest(hash_password(password), password_hash)
