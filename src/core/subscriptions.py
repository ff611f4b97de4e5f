"""Subscription catalog (core domain).

The catalog owns every Filter and Group object. Static entries come from the
shipped metadata, custom entries are registered at runtime. Other components
read these objects freely but change them only through the methods below.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.config import CUSTOM_FILTERS_START_ID, AntiBannerFilterGroupsId
from core.errors import FilterNotFoundError, GroupNotFoundError
from core.headers import parse_filter_header
from core.models import CustomFilterInfo, Filter, Group, GroupState, StateInfo, VersionInfo
from core.ports import CustomFilterDownloaderPort

LOGGER = logging.getLogger(__name__)


def normalize_locale(locale: str) -> str:
    return locale.lower().replace("-", "_")


class SubscriptionCatalog:
    """Registry of known filters and groups, including custom filters."""

    def __init__(
        self,
        groups: Iterable[Group],
        filters: Iterable[Filter],
        downloader: Optional[CustomFilterDownloaderPort] = None,
    ) -> None:
        self._groups: dict[int, Group] = {}
        for group in sorted(groups, key=lambda item: item.display_number):
            self._groups[group.group_id] = group
        self._filters: dict[int, Filter] = {}
        for filter in sorted(filters, key=lambda item: item.display_number):
            self._filters[filter.filter_id] = filter
        self._downloader = downloader

    # Lookup

    def get_filters(self) -> list[Filter]:
        return list(self._filters.values())

    def get_filter(self, filter_id: int) -> Optional[Filter]:
        return self._filters.get(filter_id)

    def get_groups(self) -> list[Group]:
        return list(self._groups.values())

    def get_group(self, group_id: int) -> Optional[Group]:
        return self._groups.get(group_id)

    def group_has_enabled_status(self, group_id: int) -> bool:
        """Return True once the group has been explicitly enabled or disabled."""

        group = self._groups.get(group_id)
        return group is not None and group.state is not GroupState.NEVER_TOGGLED

    def get_filter_ids_for_language(self, locale: str) -> list[int]:
        """Return ids of filters suitable for the locale.

        An exact locale match (``pt_br``) wins; otherwise filters for the base
        language (``pt``) are returned.
        """

        if not locale:
            return []
        normalized = normalize_locale(locale)
        by_language: dict[str, list[int]] = {}
        for filter in self._filters.values():
            for language in filter.languages:
                by_language.setdefault(normalize_locale(language), []).append(filter.filter_id)

        filter_ids = by_language.get(normalized)
        if filter_ids is None:
            filter_ids = by_language.get(normalized.split("_")[0], [])
        return list(filter_ids)

    # Mutation

    def _require(self, filter_id: int) -> Filter:
        filter = self._filters.get(filter_id)
        if filter is None:
            raise FilterNotFoundError(filter_id)
        return filter

    def set_filter_enabled(self, filter_id: int, enabled: bool) -> Filter:
        filter = self._require(filter_id)
        filter.enabled = enabled
        return filter

    def set_filter_installed(self, filter_id: int, installed: bool) -> Filter:
        filter = self._require(filter_id)
        filter.installed = installed
        return filter

    def set_filter_loaded(self, filter_id: int, loaded: bool) -> Filter:
        filter = self._require(filter_id)
        filter.loaded = loaded
        return filter

    def mark_filter_removed(self, filter_id: int) -> Filter:
        """Logically delete a filter; it stays in the registry."""

        filter = self._require(filter_id)
        filter.enabled = False
        filter.installed = False
        filter.removed = True
        return filter

    def clear_filter_removed(self, filter_id: int) -> Filter:
        filter = self._require(filter_id)
        filter.removed = False
        return filter

    def set_group_state(self, group_id: int, state: GroupState) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        group.state = state
        return group

    def apply_version_info(self, filter_id: int, info: VersionInfo) -> None:
        filter = self._require(filter_id)
        filter.version = info.version
        filter.last_check_time = info.last_check_time
        filter.last_update_time = info.last_update_time

    def apply_state_info(self, filter_id: int, info: StateInfo) -> None:
        filter = self._require(filter_id)
        filter.enabled = info.enabled
        filter.installed = info.installed
        filter.loaded = info.loaded

    def apply_group_state_info(self, group_id: int, info: StateInfo) -> None:
        self.set_group_state(group_id, GroupState.from_flag(info.enabled))

    # Custom filters

    def _find_custom_filter(self, url: str) -> Optional[Filter]:
        for filter in self._filters.values():
            if filter.custom_url == url:
                return filter
        return None

    def _next_custom_filter_id(self) -> int:
        return max([CUSTOM_FILTERS_START_ID - 1, *self._filters]) + 1

    def register_custom_filter(
        self,
        url: str,
        info: CustomFilterInfo,
        filter_id: Optional[int] = None,
    ) -> Filter:
        """Add or refresh the custom filter for ``url`` and return it.

        A URL registered before keeps its filter id.
        """

        existing = self._find_custom_filter(url)
        if existing is not None:
            existing.name = info.title or existing.name
            existing.description = info.description or existing.description
            existing.homepage = info.homepage or existing.homepage
            existing.version = info.version or existing.version
            return existing

        if filter_id is None:
            filter_id = self._next_custom_filter_id()
        filter = Filter(
            filter_id=filter_id,
            group_id=AntiBannerFilterGroupsId.CUSTOM_ID,
            name=info.title or url,
            description=info.description or "",
            homepage=info.homepage or "",
            subscription_url=url,
            display_number=filter_id,
            custom_url=url,
            version=info.version,
        )
        self._filters[filter_id] = filter
        LOGGER.info("Registered custom filter %s for %s", filter_id, url)
        return filter

    def restore_custom_filters(self, filters: Iterable[Filter]) -> None:
        """Re-register custom filters persisted by a previous session."""

        for filter in filters:
            if filter.filter_id in self._filters:
                continue
            self._filters[filter.filter_id] = filter

    async def update_custom_filter(self, url: str) -> Optional[int]:
        """Download a custom list, register it, and return its filter id."""

        if self._downloader is None:
            LOGGER.error("No downloader configured for custom filters")
            return None

        lines = await self._downloader.download(url)
        if lines is None:
            LOGGER.warning("Custom filter download failed for %s", url)
            return None

        info = parse_filter_header(lines)
        if not info.rules_count:
            LOGGER.warning("Custom filter %s contains no rules", url)
            return None
        return self.register_custom_filter(url, info).filter_id
