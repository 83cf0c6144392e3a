"""
POS Ledger – Django Settings (Infrastructure Only)
===================================================
Django hosts the key-value snapshot store that mirrors the in-memory
entity collections. The ledger engines themselves never import Django.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("POS_LEDGER_SECRET_KEY", "pos-ledger-dev-key")

DEBUG = os.environ.get("POS_LEDGER_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── POS Ledger Modules ────────────────────────────────
    "core.kv_store",
]

# ── Database ──────────────────────────────────────────────────
# SQLite file; override the location with POS_LEDGER_DB_PATH.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("POS_LEDGER_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ───────────────────────────────────────────────────
# One logger namespace per subsystem: pos.commands, pos.events,
# pos.store, pos.invoicing, pos.procurement, pos.auth ...
POS_LOG_LEVEL = os.environ.get("POS_LEDGER_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "pos": {
            "handlers": ["console"],
            "level": POS_LOG_LEVEL,
            "propagate": True,
        },
    },
}
