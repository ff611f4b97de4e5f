"""Helpers that project persisted state onto catalog objects."""

from __future__ import annotations

from core.models import Filter, Group
from core.ports import FilterStatePort
from core.subscriptions import SubscriptionCatalog


def project_filters(catalog: SubscriptionCatalog, state: FilterStatePort) -> list[Filter]:
    """Refresh version info and flags of every catalog filter from storage.

    Filters without a stored record keep their in-memory values.
    """

    versions = state.get_filters_version()
    states = state.get_filters_state()
    filters = catalog.get_filters()
    for filter in filters:
        version_info = versions.get(filter.filter_id)
        if version_info is not None:
            catalog.apply_version_info(filter.filter_id, version_info)
        state_info = states.get(filter.filter_id)
        if state_info is not None:
            catalog.apply_state_info(filter.filter_id, state_info)
    return filters


def project_groups(catalog: SubscriptionCatalog, state: FilterStatePort) -> list[Group]:
    """Refresh the enabled state of every catalog group from storage."""

    states = state.get_group_state()
    groups = catalog.get_groups()
    for group in groups:
        state_info = states.get(group.group_id)
        if state_info is not None:
            catalog.apply_group_state_info(group.group_id, state_info)
    return groups
