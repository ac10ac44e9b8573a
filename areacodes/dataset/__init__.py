"""Dataset resolution, parsing and index construction."""
