"""
Per-country dataset cache with single-flight loading.

Each supported country has one cache entry that moves through
UNBUILT -> BUILDING -> READY. The first caller for an unbuilt country submits
Load+Build to a worker thread and stores the resulting future in the entry;
every concurrent caller for that country awaits the same future, so the
loader runs at most once per country at a time.

Only the state map is guarded by a lock. Built datasets are immutable and are
read outside of it.

`clear()` bumps a generation counter. A build that was in flight during a
clear still resolves its waiters, but its result is not stored.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
import time
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from areacodes.core.countries import SUPPORTED_COUNTRIES
from areacodes.core.errors import DatasetNotFoundError
from areacodes.core.record import AreaCode
from areacodes.dataset.index import CountryDataset, build_dataset

logger = logging.getLogger(__name__)

LoadFn = Callable[[str], Sequence[AreaCode]]


class EntryState(enum.Enum):
    UNBUILT = "unbuilt"
    BUILDING = "building"
    READY = "ready"


@dataclass(slots=True)
class _Entry:
    state: EntryState = EntryState.UNBUILT
    dataset: CountryDataset | None = None
    future: Future[CountryDataset] | None = None


@dataclass(frozen=True, slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    joins: int = 0
    builds: int = 0


class CountryCache:
    """
    Lazily loads and memoizes one `CountryDataset` per country.

    Args:
        load: Callable returning the records of a country (usually
            `DatasetLoader.load`). It runs on a worker thread.
        countries: Country codes the cache serves. Fixed for the lifetime of
            the cache; codes outside the supported set are ignored.
        max_workers: Size of the loader thread pool.
    """

    def __init__(self, load: LoadFn, countries: Iterable[str], *, max_workers: int = 4) -> None:
        self._load = load
        known = {c.upper() for c in countries}
        self._known = frozenset(c for c in SUPPORTED_COUNTRIES if c in known)
        self._entries: dict[str, _Entry] = {c: _Entry() for c in self._known}
        self._lock = threading.Lock()
        self._generation = 0
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="areacodes-load"
        )
        self._load_counts: Counter[str] = Counter()
        self._hits = 0
        self._misses = 0
        self._joins = 0

    def known_countries(self) -> frozenset[str]:
        return self._known

    def state(self, country_code: str) -> EntryState:
        cc = country_code.upper()
        with self._lock:
            entry = self._entries.get(cc)
            if entry is None:
                raise DatasetNotFoundError(cc)
            return entry.state

    def load_count(self, country_code: str) -> int:
        """Number of Load+Build runs started for a country."""

        with self._lock:
            return self._load_counts[country_code.upper()]

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                joins=self._joins,
                builds=sum(self._load_counts.values()),
            )

    async def get(self, country_code: str) -> CountryDataset:
        """
        Return the dataset for a country, loading it if needed.

        Raises:
            DatasetNotFoundError: if the country is not known to this cache.
            AreaCodeError: any error raised by the loader, unchanged.
        """

        outcome = self._acquire(country_code.upper())
        if isinstance(outcome, CountryDataset):
            return outcome
        # Shielded so a cancelled caller never cancels the shared build.
        return await asyncio.shield(asyncio.wrap_future(outcome))

    def _acquire(self, cc: str) -> CountryDataset | Future[CountryDataset]:
        with self._lock:
            entry = self._entries.get(cc)
            if entry is None:
                raise DatasetNotFoundError(cc)

            if entry.state is EntryState.READY and entry.dataset is not None:
                self._hits += 1
                return entry.dataset

            if entry.state is EntryState.BUILDING and entry.future is not None:
                self._joins += 1
                return entry.future

            self._misses += 1
            self._load_counts[cc] += 1
            future = self._executor.submit(self._build, cc, self._generation)
            entry.state = EntryState.BUILDING
            entry.future = future
            entry.dataset = None
            return future

    def _build(self, cc: str, generation: int) -> CountryDataset:
        started = time.monotonic()
        try:
            dataset = build_dataset(cc, self._load(cc))
        except BaseException as exc:
            with self._lock:
                if generation == self._generation:
                    entry = self._entries[cc]
                    entry.state = EntryState.UNBUILT
                    entry.future = None
            logger.warning("Loading %s failed: %s", cc, exc, extra={"country_code": cc})
            raise

        with self._lock:
            if generation == self._generation:
                entry = self._entries[cc]
                entry.state = EntryState.READY
                entry.dataset = dataset
                entry.future = None
                stale = False
            else:
                stale = True

        if stale:
            logger.warning("Dropping %s dataset built across a cache clear", cc)
        else:
            logger.info(
                "Loaded %s: %d area codes in %.1f ms",
                cc,
                len(dataset.records),
                (time.monotonic() - started) * 1000,
                extra={"country_code": cc, "records": len(dataset.records)},
            )
        return dataset

    def clear(self) -> None:
        """Forget every dataset. In-flight builds finish but are not stored."""

        with self._lock:
            self._generation += 1
            for entry in self._entries.values():
                entry.state = EntryState.UNBUILT
                entry.dataset = None
                entry.future = None
        logger.debug("Country cache cleared")

    def close(self) -> None:
        """Release the loader thread pool, waiting for in-flight builds."""

        self._executor.shutdown(wait=True)
