"""Ports (interfaces) used by the core.

Ports define the minimal contracts for state storage, rule downloads and the
host platform so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import Filter, StateInfo, VersionInfo


class FilterStatePort(Protocol):
    """Persisted filter and group state read by the core."""

    def get_filters_version(self) -> dict[int, VersionInfo]:
        ...

    def get_filters_state(self) -> dict[int, StateInfo]:
        ...

    def get_group_state(self) -> dict[int, StateInfo]:
        ...


class FilterLoaderPort(Protocol):
    """Downloads filter bodies over the shared update channel."""

    async def load_filter_rules(self, filter: Filter, force: bool) -> bool:
        ...

    async def check_anti_banner_filters_update(self, force_update: bool) -> list[int]:
        ...


class CustomFilterDownloaderPort(Protocol):
    """Fetches the raw lines of a user supplied filter list."""

    async def download(self, url: str) -> Optional[list[str]]:
        ...


class PlatformPort(Protocol):
    """Host platform queries."""

    def get_locale(self) -> str:
        ...

    def get_user_agent(self) -> Optional[str]:
        ...
