"""Member repositories package."""

from modules.members.repositories.django_repository import MemberDjangoRepository
from modules.members.repositories.interfaces import IMemberRepository

__all__ = ["IMemberRepository", "MemberDjangoRepository"]
