"""Value objects shared across modules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AddressDTO(BaseModel):
    """Immutable address value (city / street / zipcode)."""

    model_config = ConfigDict(frozen=True)

    city: str = ""
    street: str = ""
    zipcode: str = ""
