"""Base abstract models shared by every module.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_at / updated_at timestamps.
  UUIDv7 keys are time-ordered, so ``(created_at, id)`` is a stable
  "creation order" for read models.
- ``AddressModel``: BaseModel plus flat address columns (Member, Delivery).
"""

from __future__ import annotations

import uuid6
from django.db import models

from modules.core.dtos import AddressDTO


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


class AddressModel(BaseModel):
    """Abstract model storing an address value in flat columns.

    ``address`` exposes the columns as an immutable ``AddressDTO`` so read
    models copy the value instead of holding the entity.
    """

    city = models.CharField(max_length=100, blank=True, default="")
    street = models.CharField(max_length=255, blank=True, default="")
    zipcode = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        abstract = True

    @property
    def address(self) -> AddressDTO:
        return AddressDTO(city=self.city, street=self.street, zipcode=self.zipcode)
