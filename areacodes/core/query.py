"""
Query algorithms over the country cache.

Multi-country queries (code lookup, search, suggestions, full listing) fan out
to every known country concurrently and tolerate individual failures: a
country that fails to load is skipped, and the query only fails when every
country fails. Single-country queries propagate the load error.

Results are ordered by the canonical country order (sorted ISO codes), then by
record order within a country.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, TypeVar

from areacodes.cache import CountryCache
from areacodes.core.countries import calling_codes
from areacodes.core.errors import AreaCodeError, NoDatasetsFoundError
from areacodes.core.record import AreaCode
from areacodes.dataset.index import CountryDataset

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Suggestion ranks; lower sorts first.
_RANK_EXACT_CODE = 0
_RANK_CODE_PREFIX = 1
_RANK_TEXT_PREFIX = 2


class QueryEngine:
    def __init__(self, cache: CountryCache) -> None:
        self._cache = cache
        known = cache.known_countries()
        self._countries: tuple[str, ...] = tuple(sorted(known))
        self._calling_codes = {cc: code for cc, code in calling_codes().items() if cc in known}

    def available_countries(self) -> list[str]:
        return list(self._countries)

    async def _collect(self, fn: Callable[[CountryDataset], list[T]]) -> list[T]:
        """
        Apply `fn` to every country's dataset and concatenate the results.

        Raises:
            NoDatasetsFoundError: if no country is known.
            AreaCodeError: the first failure, if every country failed to load.
        """

        if not self._countries:
            raise NoDatasetsFoundError()

        outcomes = await asyncio.gather(
            *(self._cache.get(cc) for cc in self._countries), return_exceptions=True
        )

        out: list[T] = []
        first_error: AreaCodeError | None = None
        loaded = 0
        for cc, outcome in zip(self._countries, outcomes):
            if isinstance(outcome, AreaCodeError):
                logger.warning("Skipping %s: %s", cc, outcome, extra={"country_code": cc})
                if first_error is None:
                    first_error = outcome
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            loaded += 1
            out.extend(fn(outcome))

        if loaded == 0 and first_error is not None:
            raise first_error
        return out

    async def lookup_code(self, code: str) -> list[AreaCode]:
        """Every record whose area code equals `code` exactly, across countries."""

        return await self._collect(lambda ds: ds.lookup_code(code))

    def candidate_countries(self, e164: str) -> list[str]:
        """
        Countries whose calling code is the longest prefix of `e164`.

        Several countries can share a calling code (US and CA share "1"); they
        are returned in canonical order.
        """

        best = 0
        out: list[str] = []
        for cc in self._countries:
            prefix = self._calling_codes[cc]
            if not e164.startswith(prefix):
                continue
            if len(prefix) > best:
                best = len(prefix)
                out = [cc]
            elif len(prefix) == best:
                out.append(cc)
        return out

    async def lookup_e164(self, e164: str) -> AreaCode | None:
        """
        The record whose e164 equals the given number, if any.

        A leading "+" is ignored. Countries sharing the matched calling code
        are consulted in canonical order; the first hit wins. A candidate that
        fails to load is skipped; its error is raised only if no other
        candidate has the number.
        """

        number = e164.strip()
        if number.startswith("+"):
            number = number[1:]
        if not number:
            return None

        first_error: AreaCodeError | None = None
        for cc in self.candidate_countries(number):
            try:
                dataset = await self._cache.get(cc)
            except AreaCodeError as exc:
                logger.warning("Skipping %s: %s", cc, exc, extra={"country_code": cc})
                if first_error is None:
                    first_error = exc
                continue
            found = dataset.lookup_e164(number)
            if found is not None:
                return found

        if first_error is not None:
            raise first_error
        return None

    async def search(self, query: str) -> list[AreaCode]:
        if not query.strip():
            return []
        return await self._collect(lambda ds: ds.search(query))

    async def codes(self, country_code: str) -> list[AreaCode]:
        cc = country_code.strip().upper()
        if cc not in self._countries:
            return []
        dataset = await self._cache.get(cc)
        return list(dataset.records)

    async def all_codes(self) -> list[AreaCode]:
        return await self._collect(lambda ds: list(ds.records))

    async def suggestions(self, prefix: str, limit: int) -> list[AreaCode]:
        """
        Autocomplete by area-code prefix or by city/region prefix.

        Exact code matches rank first, then other code-prefix matches, then
        records whose city or region starts with `prefix` (case-insensitive).
        """

        needle = prefix.strip()
        if limit <= 0 or not needle:
            return []
        lowered = needle.lower()

        def rank(ds: CountryDataset) -> list[tuple[int, AreaCode]]:
            ranked: list[tuple[int, AreaCode]] = []
            for record in ds.records:
                if record.code == needle:
                    ranked.append((_RANK_EXACT_CODE, record))
                elif record.code.startswith(needle):
                    ranked.append((_RANK_CODE_PREFIX, record))
                elif record.city.lower().startswith(lowered) or record.region.lower().startswith(
                    lowered
                ):
                    ranked.append((_RANK_TEXT_PREFIX, record))
            return ranked

        ranked = await self._collect(rank)
        # sorted() is stable, so country and record order survive within a rank.
        ranked = sorted(ranked, key=lambda item: item[0])
        return [record for _, record in ranked[:limit]]
