"""Adapters for filtersync: SQLite state, HTTP downloads, platform and console output."""
