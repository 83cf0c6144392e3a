"""
POS Key-Value Store - App Configuration
=======================================
Durable mirror of the in-memory entity collections.
"""

from django.apps import AppConfig


class CoreKvStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.kv_store"
    label = "core_kv_store"
    verbose_name = "POS Key-Value Store"
