"""
Error taxonomy for dataset loading.

Errors are structured: each carries the country it relates to (when there is
one) and a human-readable detail, so callers can surface them unmodified.
"""

from __future__ import annotations


class AreaCodeError(Exception):
    """Base class for all dataset loading errors."""

    def __init__(self, detail: str, *, country_code: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.country_code = country_code


class DatasetNotFoundError(AreaCodeError):
    """Raised when no dataset resource exists for a country."""

    def __init__(self, country_code: str) -> None:
        super().__init__(f"No area-code dataset found for {country_code}.", country_code=country_code)


class NoDatasetsFoundError(AreaCodeError):
    """Raised when not a single supported country can be resolved."""

    def __init__(self) -> None:
        super().__init__("No area-code datasets are available.")


class InvalidDataError(AreaCodeError):
    """Raised when a dataset parses but a row is semantically malformed."""


class DecodingFailedError(AreaCodeError):
    """Raised when a dataset resource cannot be parsed at all."""


class DatasetReadError(AreaCodeError):
    """Raised when a dataset resource exists but cannot be read."""
