"""The area-code record type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AreaCode:
    """
    One area-code entry of a country's numbering plan.

    Fields:
        code: National area-code prefix, digits only (e.g. "212").
        country_code: ISO 3166-1 alpha-2 code of the owning dataset (e.g. "US").
        region: Administrative region (state, province, ...). May be empty.
        city: Main city served by the code. May be empty.
        e164: Calling code followed by `code`, digits only, no leading "+".
        notes: Free-text remarks (overlays, coverage). May be empty.
    """

    code: str
    country_code: str
    region: str
    city: str
    e164: str
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "country_code": self.country_code,
            "region": self.region,
            "city": self.city,
            "e164": self.e164,
            "notes": self.notes,
        }
