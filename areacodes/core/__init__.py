"""Domain types, country metadata, errors and query algorithms."""
