"""
POS Key-Value Store - Collection Snapshots
==========================================
One row per collection key. The payload is the whole serialized
collection as written by the entity store after its latest commit.
"""

from __future__ import annotations

from django.db import models


class CollectionSnapshot(models.Model):
    key = models.CharField(max_length=128, primary_key=True)
    payload = models.JSONField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pos_collection_snapshots"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key} @ {self.updated_at}"
