"""
Dataset sources.

A source resolves a country code to the raw text of its dataset and can list
which countries it holds. Sources only read; parsing lives in
`areacodes.dataset.loader`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Callable

from areacodes.core.errors import DatasetNotFoundError, DatasetReadError, DecodingFailedError

DATASET_SUFFIX = ".json"


def _read_text(read: Callable[[], str], country_code: str) -> str:
    """Run a resource read, translating I/O failures into dataset errors."""

    cc = country_code.upper()
    try:
        return read()
    except (FileNotFoundError, IsADirectoryError) as exc:
        raise DatasetNotFoundError(cc) from exc
    except UnicodeDecodeError as exc:
        raise DecodingFailedError(
            f"Dataset is not valid UTF-8: {exc.reason} at byte {exc.start}.", country_code=cc
        ) from exc
    except OSError as exc:
        raise DatasetReadError(
            f"Could not read dataset: {exc.strerror or exc}.", country_code=cc
        ) from exc


def _country_for_filename(name: str) -> str | None:
    if not name.endswith(DATASET_SUFFIX):
        return None
    stem = name[: -len(DATASET_SUFFIX)]
    if len(stem) != 2 or not stem.isalpha():
        return None
    return stem.upper()


class DatasetSource(ABC):
    """Base interface for dataset resources."""

    @abstractmethod
    def read(self, country_code: str) -> str:
        """
        Return the dataset text for a country.

        Raises:
            DatasetNotFoundError: if the source has no dataset for the country.
            DecodingFailedError: if the resource is not valid UTF-8.
            DatasetReadError: on any other I/O failure.
        """

        raise NotImplementedError

    @abstractmethod
    def available(self) -> list[str]:
        """List the (uppercase) country codes this source can resolve."""

        raise NotImplementedError


class PackagedDatasetSource(DatasetSource):
    """Datasets bundled inside the `areacodes.data` package."""

    def __init__(self, package: str = "areacodes.data") -> None:
        self._package = package

    def read(self, country_code: str) -> str:
        resource = resources.files(self._package).joinpath(
            f"{country_code.lower()}{DATASET_SUFFIX}"
        )
        return _read_text(lambda: resource.read_text(encoding="utf-8"), country_code)

    def available(self) -> list[str]:
        out: list[str] = []
        for entry in resources.files(self._package).iterdir():
            cc = _country_for_filename(entry.name)
            if cc is not None and entry.is_file():
                out.append(cc)
        return sorted(out)


class DirectoryDatasetSource(DatasetSource):
    """Datasets stored as `<iso>.json` files in a directory."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self, country_code: str) -> str:
        file = self.path / f"{country_code.lower()}{DATASET_SUFFIX}"
        return _read_text(lambda: file.read_text(encoding="utf-8"), country_code)

    def available(self) -> list[str]:
        if not self.path.is_dir():
            return []
        out: list[str] = []
        for file in self.path.iterdir():
            cc = _country_for_filename(file.name)
            if cc is not None and file.is_file():
                out.append(cc)
        return sorted(out)
