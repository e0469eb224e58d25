"""Pydantic schema for extracted disposal-site records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SiteRecord(BaseModel):
    """Canonical output record for one controlled-substance disposal site.

    Serialize with ``model_dump(by_alias=True)`` to get the camelCase keys
    used by the JSON API (``cityStateZip``, ``mapUrl``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    address1: str = ""
    address2: str = ""
    city_state_zip: str = Field(default="", alias="cityStateZip")
    distance: str = ""
    map_url: str = Field(default="", alias="mapUrl")

    @field_validator(
        "name", "address1", "address2", "city_state_zip", "distance", "map_url",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @property
    def street_address(self) -> str:
        """Address lines joined the way the results page displays them."""
        return " ".join(part for part in (self.address1, self.address2) if part)

    def to_dict(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
