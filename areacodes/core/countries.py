"""
Supported countries and display helpers.

The set of countries is closed: only countries listed in `COUNTRY_NAMES` can
be loaded. Calling codes come from libphonenumber metadata (via
`phonenumbers`) rather than being maintained by hand.

All helpers here are pure functions of a country code or a record.
"""

from __future__ import annotations

from functools import lru_cache

import phonenumbers

from areacodes.core.record import AreaCode

COUNTRY_NAMES: dict[str, str] = {
    "AU": "Australia",
    "BY": "Belarus",
    "CA": "Canada",
    "DE": "Germany",
    "FR": "France",
    "GB": "United Kingdom",
    "US": "United States",
}

SUPPORTED_COUNTRIES: tuple[str, ...] = tuple(sorted(COUNTRY_NAMES))

# Offset between "A" and REGIONAL INDICATOR SYMBOL LETTER A.
_REGIONAL_INDICATOR_OFFSET = 0x1F1E6 - ord("A")


def is_supported(country_code: str) -> bool:
    return country_code.upper() in COUNTRY_NAMES


@lru_cache(maxsize=None)
def calling_code(country_code: str) -> str:
    """
    Return the international calling code for a supported country, as digits.

    Raises:
        KeyError: if the country is not supported.
    """

    cc = country_code.upper()
    if cc not in COUNTRY_NAMES:
        raise KeyError(cc)
    value = phonenumbers.country_code_for_region(cc)
    if not value:
        # libphonenumber returns 0 for regions it has no metadata for.
        raise KeyError(cc)
    return str(value)


def calling_codes() -> dict[str, str]:
    """Map every supported country to its calling code."""

    return {cc: calling_code(cc) for cc in SUPPORTED_COUNTRIES}


def flag(country_code: str) -> str:
    """Return the emoji flag for an ISO alpha-2 code (empty if not alpha-2)."""

    cc = country_code.upper()
    if len(cc) != 2 or not cc.isascii() or not cc.isalpha():
        return ""
    return "".join(chr(ord(ch) + _REGIONAL_INDICATOR_OFFSET) for ch in cc)


def country_name(country_code: str) -> str:
    cc = country_code.upper()
    return COUNTRY_NAMES.get(cc, cc)


def display_name(record: AreaCode) -> str:
    """Title line for a record, e.g. "🇺🇸 New York (212)"."""

    place = record.city or record.region or country_name(record.country_code)
    return f"{flag(record.country_code)} {place} ({record.code})".strip()


def subtitle(record: AreaCode) -> str:
    """Secondary line for a record, e.g. "+1212 · New York, United States"."""

    parts = [p for p in (record.region, country_name(record.country_code)) if p]
    return f"+{record.e164} · {', '.join(parts)}"
