"""Member service layer (Use Cases).

Orchestrates business logic for the Member aggregate, delegating
persistence to the injected ``IMemberRepository``.

Business rules enforced here:
- Member names are unique (duplicate registration rejected).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.members.exceptions import MemberAlreadyExists, MemberNotFound
from modules.members.models import Member

if TYPE_CHECKING:
    from modules.members.dtos import CreateMemberDTO, UpdateMemberDTO
    from modules.members.repositories.interfaces import IMemberRepository

logger = structlog.get_logger(__name__)


class MemberService:
    """Application service for Member use-cases.

    Receives an ``IMemberRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IMemberRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def join(self, dto: CreateMemberDTO) -> Member:
        """Register a new member.

        Raises:
            MemberAlreadyExists: if the name is already taken.
        """
        self._validate_duplicate_member(dto.name)

        member = Member(
            name=dto.name,
            city=dto.address.city,
            street=dto.address.street,
            zipcode=dto.address.zipcode,
        )
        member = self._repo.save(member)
        logger.info("member.joined", member_id=str(member.id))
        return member

    @transaction.atomic
    def update_member(self, id: str, dto: UpdateMemberDTO) -> Member:
        """Rename an existing member.

        Raises:
            MemberNotFound: if the member does not exist.
            MemberAlreadyExists: if another member already uses the name.
        """
        member = self._repo.get_by_id(id)
        if not member:
            raise MemberNotFound(f"Member {id} not found.")

        if dto.name != member.name:
            self._validate_duplicate_member(dto.name)
            member.name = dto.name
            member = self._repo.save(member)

        logger.info("member.updated", member_id=str(id))
        return member

    def _validate_duplicate_member(self, name: str) -> None:
        if self._repo.find_by_name(name):
            logger.warning("member.duplicate_name")
            raise MemberAlreadyExists(f"Member '{name}' already exists.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_members(self, filters: Optional[Dict[str, Any]] = None) -> List[Member]:
        """Return every member, optionally filtered."""
        return self._repo.list(filters)

    def get_member(self, id: str) -> Member:
        """Retrieve a single member by ID.

        Raises:
            MemberNotFound: if the member does not exist.
        """
        member = self._repo.get_by_id(id)
        if not member:
            raise MemberNotFound(f"Member {id} not found.")
        return member
