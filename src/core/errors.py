"""Exceptions raised by the core domain."""

from __future__ import annotations


class FilterSyncError(Exception):
    """Base class for filtersync errors."""


class FilterNotFoundError(FilterSyncError):
    """Raised when an internal caller requires a filter that does not exist."""

    def __init__(self, filter_id: int) -> None:
        super().__init__(f"Filter with id {filter_id} not found")
        self.filter_id = filter_id


class GroupNotFoundError(FilterSyncError):
    """Raised when an internal caller requires a group that does not exist."""

    def __init__(self, group_id: int) -> None:
        super().__init__(f"Group with id {group_id} not found")
        self.group_id = group_id
