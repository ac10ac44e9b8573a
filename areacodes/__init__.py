"""
areacodes - offline area-code lookup, search and autocomplete.

This package bundles a static per-country dataset of telephone area codes and
provides an async-safe service to query it: exact code lookups, E.164
disambiguation, free-text search, and prefix suggestions.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
