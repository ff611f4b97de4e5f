"""Filter lifecycle orchestration (core domain).

This module is integration-agnostic. It reads and mutates the subscription
catalog, reads persisted state through a port, emits events on the bus and
delegates rule downloads to the loader port.

Every state transition follows the same order: mutate the catalog, then
notify listeners. Persistence happens in a listener, never here.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from core.categories import CategorySelector
from core.config import OFFERED_GROUP_IDS
from core.errors import FilterNotFoundError
from core.events import EventBus, EventKind
from core.models import Filter, Group, GroupState
from core.ports import FilterLoaderPort, FilterStatePort
from core.state import project_filters, project_groups
from core.subscriptions import SubscriptionCatalog

LOGGER = logging.getLogger(__name__)


def _remove_duplicates(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(ids))


class FiltersManager:
    """Enables, disables, installs and removes filters and groups."""

    def __init__(
        self,
        catalog: SubscriptionCatalog,
        selector: CategorySelector,
        state: FilterStatePort,
        loader: FilterLoaderPort,
        bus: EventBus,
    ) -> None:
        self._catalog = catalog
        self._selector = selector
        self._state = state
        self._loader = loader
        self._bus = bus

    def _get_filter_by_id(self, filter_id: int) -> Filter:
        filter = self._catalog.get_filter(filter_id)
        if filter is None:
            raise FilterNotFoundError(filter_id)
        return filter

    # Queries

    def get_filters(self) -> list[Filter]:
        """Return all catalog filters with persisted version and state applied."""

        return project_filters(self._catalog, self._state)

    def get_groups(self) -> list[Group]:
        """Return all catalog groups with persisted enabled state applied."""

        return project_groups(self._catalog, self._state)

    def is_filter_enabled(self, filter_id: int) -> bool:
        if self._catalog.get_filter(filter_id) is None:
            return False
        state_info = self._state.get_filters_state().get(filter_id)
        return bool(state_info and state_info.enabled)

    def is_group_enabled(self, group_id: int) -> bool:
        group = self._catalog.get_group(group_id)
        return bool(group and group.enabled)

    # Groups

    def enable_group(self, group_id: int) -> None:
        group = self._catalog.get_group(group_id)
        if group is None or group.enabled:
            return

        group = self._catalog.set_group_state(group_id, GroupState.ENABLED)
        self._bus.notify_listeners(EventKind.FILTER_GROUP_ENABLE_DISABLE, group)
        LOGGER.info("Group %s enabled", group_id)

    def disable_group(self, group_id: int) -> None:
        group = self._catalog.get_group(group_id)
        # A NEVER_TOGGLED group is not enabled, so it stays untouched here.
        if group is None or not group.enabled:
            return

        group = self._catalog.set_group_state(group_id, GroupState.DISABLED)
        self._bus.notify_listeners(EventKind.FILTER_GROUP_ENABLE_DISABLE, group)
        LOGGER.info("Group %s disabled", group_id)

    async def enable_filters_group(self, group_id: int) -> None:
        """Enable a group, seeding its recommended filters on first enable.

        Only a NEVER_TOGGLED group is seeded; later calls just toggle the group.
        """

        group = self._catalog.get_group(group_id)
        seed = group is not None and group.state is GroupState.NEVER_TOGGLED
        recommended = self._selector.get_recommended_filter_ids_by_group_id(group_id) if seed else []

        # The group leaves NEVER_TOGGLED before the first await, so a concurrent
        # call cannot seed it again.
        self.enable_group(group_id)
        if recommended:
            await self.add_and_enable_filters(recommended)

    def disable_filters_group(self, group_id: int) -> None:
        self.disable_group(group_id)

    # Filters

    def enable_filter(self, filter_id: int) -> None:
        if self.is_filter_enabled(filter_id):
            return

        filter = self._catalog.get_filter(filter_id)
        if filter is None:
            LOGGER.warning("Filter %s not found, cannot enable", filter_id)
            return

        filter = self._catalog.set_filter_enabled(filter_id, True)

        # A group that was never enabled or disabled follows its first filter.
        if not self._catalog.group_has_enabled_status(filter.group_id):
            self.enable_group(filter.group_id)

        self._bus.notify_listeners(EventKind.FILTER_ENABLE_DISABLE, filter)
        LOGGER.info("Filter %s enabled successfully", filter_id)

    def disable_filters(self, filter_ids: Iterable[int]) -> None:
        """Disable filters in order, stopping at the first one not enabled."""

        for filter_id in _remove_duplicates(filter_ids):
            if not self.is_filter_enabled(filter_id):
                return

            filter = self._catalog.set_filter_enabled(filter_id, False)
            self._bus.notify_listeners(EventKind.FILTER_ENABLE_DISABLE, filter)
            LOGGER.info("Filter %s disabled successfully", filter_id)

    async def add_anti_banner_filter(self, filter_id: int) -> bool:
        """Install a filter, downloading its rules when they are not loaded yet.

        Raises FilterNotFoundError for an unknown id. Returns whether the
        filter ended up installed.
        """

        filter = self._get_filter_by_id(filter_id)
        if filter.installed:
            return True

        if filter.loaded:
            success = True
        else:
            try:
                success = await self._loader.load_filter_rules(filter, False)
            except Exception:
                LOGGER.exception("Loader failed for filter %s", filter_id)
                success = False

        if success:
            filter = self._catalog.set_filter_installed(filter_id, True)
            self._bus.notify_listeners(EventKind.FILTER_ADD_REMOVE, filter)
            LOGGER.info("Filter %s added successfully", filter_id)
        else:
            LOGGER.warning("Filter %s could not be loaded", filter_id)
        return success

    async def add_and_enable_filters(self, filter_ids: Iterable[int]) -> None:
        """Install and enable filters strictly one at a time.

        The next download starts only after the previous install-and-enable
        step has finished. A failed item is skipped, the batch continues.
        """

        pending = _remove_duplicates(filter_ids)
        if not pending:
            return

        for filter_id in pending:
            try:
                success = await self.add_anti_banner_filter(filter_id)
            except FilterNotFoundError:
                LOGGER.error("Filter %s not found, skipping", filter_id)
                continue
            if success:
                self.enable_filter(filter_id)

    async def add_and_enable_filters_by_group_id(self, group_id: int) -> None:
        await self.add_and_enable_filters(
            self._selector.get_recommended_filter_ids_by_group_id(group_id)
        )

    def disable_anti_banner_filters_by_group_id(self, group_id: int) -> None:
        self.disable_filters(self._selector.get_recommended_filter_ids_by_group_id(group_id))

    def remove_filter(self, filter_id: int) -> None:
        """Remove a custom filter. Catalog filters cannot be removed."""

        filter = self._catalog.get_filter(filter_id)
        if filter is None or filter.removed:
            LOGGER.info("Filter %s is absent or already removed", filter_id)
            return

        if not filter.is_custom:
            LOGGER.error("Filter %s is not custom and could not be removed", filter_id)
            return

        LOGGER.debug("Remove filter %s", filter_id)
        filter = self._catalog.mark_filter_removed(filter_id)
        self._bus.notify_listeners(EventKind.FILTER_ENABLE_DISABLE, filter)
        self._bus.notify_listeners(EventKind.FILTER_ADD_REMOVE, filter)

    # Onboarding and updates

    def offer_groups_and_filters(
        self, callback: Optional[Callable[[list[int]], None]] = None
    ) -> list[int]:
        """Return the groups offered on first run, in display order."""

        group_ids = list(OFFERED_GROUP_IDS)
        if callback is not None:
            callback(group_ids)
        return group_ids

    async def check_anti_banner_filters_update(self, force_update: bool) -> list[int]:
        """Ask the loader to refresh filters.

        Without ``force_update`` the loader respects the update period.
        """

        return await self._loader.check_anti_banner_filters_update(force_update)

    async def load_custom_filter(
        self,
        url: Optional[str],
        on_success: Callable[[Filter], None],
        on_error: Optional[Callable[[], None]] = None,
    ) -> Optional[Filter]:
        """Download a user supplied list and register it as a custom filter."""

        LOGGER.info("Downloading custom filter from %s", url)
        on_error = on_error or (lambda: None)

        if not url:
            on_error()
            return None

        filter_id = await self._catalog.update_custom_filter(url)
        if filter_id is None:
            on_error()
            return None

        LOGGER.info("Custom filter info downloaded")
        # Re-adding a previously removed custom filter revives it.
        filter = self._catalog.clear_filter_removed(filter_id)
        on_success(filter)
        return filter
