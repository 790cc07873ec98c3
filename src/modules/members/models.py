"""Member model.

Business rules implemented:
- Member name must be unique (checked at service layer, enforced by index).
- A member is referenced by many orders but never owns them.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import AddressModel


class Member(AddressModel):
    """Member aggregate root.

    The address is stored as flat columns (see ``AddressModel``) and
    exposed as an ``AddressDTO`` value.
    """

    name = models.CharField(max_length=255, unique=True)

    class Meta:
        db_table = "members"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return self.name
