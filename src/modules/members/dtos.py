"""Member DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateMemberDTO``: input for member registration.
- ``UpdateMemberDTO``: input for a partial update (rename).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from modules.core.dtos import AddressDTO


def _strip_required(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Name must not be empty.")
    return v.strip()


class CreateMemberDTO(BaseModel):
    """Immutable DTO for member registration requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: AddressDTO = AddressDTO()

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _strip_required(v)


class UpdateMemberDTO(BaseModel):
    """Immutable DTO for member updates.  Only ``name`` can change."""

    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _strip_required(v)
