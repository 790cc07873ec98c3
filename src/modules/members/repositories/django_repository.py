"""Django ORM implementation of the Member repository.

Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions, and the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.members.models import Member
from modules.members.repositories.interfaces import IMemberRepository

logger = structlog.get_logger(__name__)


class MemberDjangoRepository(IMemberRepository):
    """Concrete Member repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Member]:
        """Retrieve a member by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Member.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Member]:
        """List members with optional Django ORM look-ups.

        Example::

            {"name__icontains": "member"}
        """
        queryset = Member.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Member) -> Member:
        """Persist (create or update) a member."""
        is_new = entity._state.adding
        entity.save()
        logger.info("member.saved", member_id=str(entity.id), is_new=is_new)
        return entity

    def find_by_name(self, name: str) -> List[Member]:
        return list(Member.objects.filter(name=name))
