"""
Public entry point.

`AreaCodeService` wires a dataset source, the loader, the country cache and
the query engine together. It is an ordinary object: create one, use it from
any number of concurrent tasks, and close it when done.

    async with AreaCodeService.from_settings(load_settings()) as service:
        matches = await service.lookup("212")
"""

from __future__ import annotations

import logging
from types import TracebackType

from areacodes.cache import CountryCache, LoadFn
from areacodes.config import AreaCodeSettings
from areacodes.core.countries import SUPPORTED_COUNTRIES
from areacodes.core.query import QueryEngine
from areacodes.core.record import AreaCode
from areacodes.dataset.loader import DatasetLoader
from areacodes.dataset.source import DatasetSource, DirectoryDatasetSource, PackagedDatasetSource

logger = logging.getLogger(__name__)


class AreaCodeService:
    """
    Async-safe facade over the area-code dataset.

    Args:
        source: Where datasets are read from (default: bundled data).
        load: Override for the record loader, mainly for tests. Defaults to
            `DatasetLoader(source).load`.
        max_workers: Loader thread pool size.
        suggestion_limit: Default `limit` for `suggestions`.
    """

    def __init__(
        self,
        source: DatasetSource | None = None,
        *,
        load: LoadFn | None = None,
        max_workers: int = 4,
        suggestion_limit: int = 10,
    ) -> None:
        self.source = source or PackagedDatasetSource()
        loader = load or DatasetLoader(self.source).load

        available = set(self.source.available())
        ignored = sorted(available.difference(SUPPORTED_COUNTRIES))
        if ignored:
            logger.info("Ignoring datasets for unsupported countries: %s", ", ".join(ignored))

        self._cache = CountryCache(loader, available, max_workers=max_workers)
        self._engine = QueryEngine(self._cache)
        self.suggestion_limit = suggestion_limit

    @classmethod
    def from_settings(cls, settings: AreaCodeSettings) -> AreaCodeService:
        source: DatasetSource
        if settings.data_dir is not None:
            source = DirectoryDatasetSource(settings.data_dir)
        else:
            source = PackagedDatasetSource()
        return cls(
            source,
            max_workers=settings.max_load_workers,
            suggestion_limit=settings.suggestion_limit,
        )

    @property
    def cache(self) -> CountryCache:
        return self._cache

    async def get_all_codes(self) -> list[AreaCode]:
        return await self._engine.all_codes()

    async def lookup(self, code: str) -> list[AreaCode]:
        return await self._engine.lookup_code(code)

    async def lookup_e164(self, e164: str) -> AreaCode | None:
        return await self._engine.lookup_e164(e164)

    async def search(self, query: str) -> list[AreaCode]:
        return await self._engine.search(query)

    async def codes(self, country_code: str) -> list[AreaCode]:
        return await self._engine.codes(country_code)

    async def suggestions(self, prefix: str, limit: int | None = None) -> list[AreaCode]:
        return await self._engine.suggestions(
            prefix, self.suggestion_limit if limit is None else limit
        )

    def available_countries(self) -> list[str]:
        return self._engine.available_countries()

    def clear_cache(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        self._cache.close()

    async def __aenter__(self) -> AreaCodeService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
