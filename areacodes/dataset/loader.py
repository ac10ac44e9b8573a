"""
Dataset loading.

A dataset is a JSON array of row objects:

    [{"code": "212", "country_code": "US", "region": "New York",
      "city": "New York", "e164": "1212", "notes": "Manhattan"}, ...]

Required fields (`code`, `country_code`, `e164`) are checked strictly: one bad
row fails the whole load. Optional text fields default to an empty string.
"""

from __future__ import annotations

import json
import logging

from areacodes.core.countries import calling_code, is_supported
from areacodes.core.errors import DatasetNotFoundError, DecodingFailedError, InvalidDataError
from areacodes.core.record import AreaCode
from areacodes.dataset.source import DatasetSource

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("code", "country_code", "e164")


def _optional_text(obj: dict[str, object], key: str) -> str:
    value = obj.get(key)
    return value.strip() if isinstance(value, str) else ""


def parse_row(obj: dict[str, object], *, country_code: str, index: int) -> AreaCode:
    """
    Build an `AreaCode` from one decoded row.

    Raises:
        InvalidDataError: if a required field is missing or inconsistent.
    """

    values: dict[str, str] = {}
    for key in REQUIRED_FIELDS:
        raw = obj.get(key)
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidDataError(
                f"Row {index}: missing required field '{key}'.", country_code=country_code
            )
        values[key] = raw.strip()

    code, row_country, e164 = values["code"], values["country_code"].upper(), values["e164"]
    if not code.isdigit() or not e164.isdigit():
        raise InvalidDataError(
            f"Row {index}: 'code' and 'e164' must contain digits only.", country_code=country_code
        )
    if row_country != country_code:
        raise InvalidDataError(
            f"Row {index}: country_code {row_country} does not match dataset {country_code}.",
            country_code=country_code,
        )
    expected = calling_code(country_code) + code
    if e164 != expected:
        raise InvalidDataError(
            f"Row {index}: e164 {e164} does not match calling code + code ({expected}).",
            country_code=country_code,
        )

    return AreaCode(
        code=code,
        country_code=row_country,
        region=_optional_text(obj, "region"),
        city=_optional_text(obj, "city"),
        e164=e164,
        notes=_optional_text(obj, "notes"),
    )


def parse_dataset(text: str, *, country_code: str) -> list[AreaCode]:
    """
    Parse dataset text into records, preserving row order.

    Raises:
        DecodingFailedError: on malformed JSON or an unexpected structure.
        InvalidDataError: on a semantically malformed row.
    """

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodingFailedError(
            f"Malformed dataset: {exc.msg} (line {exc.lineno}, column {exc.colno}).",
            country_code=country_code,
        ) from exc

    if not isinstance(raw, list):
        raise DecodingFailedError("Dataset must contain a JSON array.", country_code=country_code)

    records: list[AreaCode] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise DecodingFailedError(
                f"Row {index}: expected a JSON object, got {type(item).__name__}.",
                country_code=country_code,
            )
        records.append(parse_row(item, country_code=country_code, index=index))
    return records


class DatasetLoader:
    """Reads and parses one country's dataset from a `DatasetSource`."""

    def __init__(self, source: DatasetSource) -> None:
        self.source = source

    def load(self, country_code: str) -> list[AreaCode]:
        cc = country_code.upper()
        if not is_supported(cc):
            raise DatasetNotFoundError(cc)
        text = self.source.read(cc)
        records = parse_dataset(text, country_code=cc)
        logger.debug("Parsed %d rows for %s", len(records), cc)
        return records
