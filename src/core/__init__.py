"""Core domain package for filtersync.

Core holds the filter/group state model, recommendation selection, and the
lifecycle orchestration without any SQLite, HTTP, or platform-specific code,
keeping the business logic portable.
"""
