"""
In-memory indexes over one country's records.

`build_dataset` is pure and deterministic: the same record sequence always
yields the same indexes. For duplicate e164 values the first record wins and
later ones are dropped from the e164 index (they stay in `records` and in the
code index).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from areacodes.core.record import AreaCode

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"\W+")
_WORD_ONLY = re.compile(r"\w+")

# Separates fields in the search haystack so a match can never span two fields.
_FIELD_SEPARATOR = "\x00"


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT.split(text.lower()) if t]


def search_text(record: AreaCode) -> str:
    return _FIELD_SEPARATOR.join((record.city, record.region, record.notes)).lower()


@dataclass(frozen=True, slots=True)
class CountryDataset:
    """
    One country's records plus derived lookup structures.

    Instances are immutable once built and safe to share between readers.
    """

    country_code: str
    records: tuple[AreaCode, ...]
    by_code: Mapping[str, tuple[AreaCode, ...]]
    by_e164: Mapping[str, AreaCode]
    tokens: Mapping[str, tuple[int, ...]]
    haystacks: tuple[str, ...]
    dropped_duplicates: tuple[AreaCode, ...] = field(default=())

    def lookup_code(self, code: str) -> list[AreaCode]:
        return list(self.by_code.get(code, ()))

    def lookup_e164(self, e164: str) -> AreaCode | None:
        return self.by_e164.get(e164)

    def search(self, query: str) -> list[AreaCode]:
        """
        Case-insensitive substring match against city, region and notes.

        Single-word queries are narrowed through the token index first; every
        occurrence of a word-only query lies inside one token, so the result is
        the same as a full scan.
        """

        if not query.strip():
            return []
        needle = query.lower()

        if _WORD_ONLY.fullmatch(needle):
            positions: set[int] = set()
            for token, hits in self.tokens.items():
                if needle in token:
                    positions.update(hits)
            candidates: Iterable[int] = sorted(positions)
        else:
            candidates = range(len(self.records))

        return [self.records[i] for i in candidates if needle in self.haystacks[i]]


def build_dataset(country_code: str, records: Iterable[AreaCode]) -> CountryDataset:
    """Build a `CountryDataset` from already-validated records."""

    ordered = tuple(records)
    by_code: dict[str, list[AreaCode]] = {}
    by_e164: dict[str, AreaCode] = {}
    tokens: dict[str, list[int]] = {}
    dropped: list[AreaCode] = []

    for position, record in enumerate(ordered):
        by_code.setdefault(record.code, []).append(record)

        if record.e164 in by_e164:
            dropped.append(record)
            logger.warning(
                "Duplicate e164 %s in %s; keeping first entry (%s), dropping %s",
                record.e164,
                country_code,
                by_e164[record.e164].city or by_e164[record.e164].region,
                record.city or record.region,
            )
        else:
            by_e164[record.e164] = record

        seen: set[str] = set()
        for text in (record.city, record.region, record.notes):
            for token in tokenize(text):
                if token not in seen:
                    seen.add(token)
                    tokens.setdefault(token, []).append(position)

    return CountryDataset(
        country_code=country_code,
        records=ordered,
        by_code={k: tuple(v) for k, v in by_code.items()},
        by_e164=by_e164,
        tokens={k: tuple(v) for k, v in tokens.items()},
        haystacks=tuple(search_text(r) for r in ordered),
        dropped_duplicates=tuple(dropped),
    )
