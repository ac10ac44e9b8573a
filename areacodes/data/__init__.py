"""Bundled per-country area-code datasets (`<iso>.json`)."""
