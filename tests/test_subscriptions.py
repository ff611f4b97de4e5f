from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from core.config import CUSTOM_FILTERS_START_ID, AntiBannerFilterGroupsId
from core.errors import FilterNotFoundError, FilterSyncError, GroupNotFoundError
from core.models import CustomFilterInfo, Filter, Group, GroupState, StateInfo
from core.subscriptions import SubscriptionCatalog


class FakeDownloader:
    def __init__(self, lines: Optional[list[str]]) -> None:
        self.lines = lines

    async def download(self, url: str) -> Optional[list[str]]:
        return self.lines


def _catalog(downloader: Optional[FakeDownloader] = None) -> SubscriptionCatalog:
    groups = [
        Group(group_id=AntiBannerFilterGroupsId.CUSTOM_ID, name="Custom"),
        Group(group_id=7, name="Language-specific"),
    ]
    filters = [
        Filter(filter_id=1, group_id=7, name="Russian", languages=("ru", "uk")),
        Filter(filter_id=9, group_id=7, name="Spanish/Portuguese", languages=("es", "pt", "pt_BR")),
        Filter(filter_id=224, group_id=7, name="Chinese", languages=("zh", "zh_TW")),
        Filter(filter_id=225, group_id=7, name="Taiwanese", languages=("zh_TW",)),
    ]
    return SubscriptionCatalog(groups, filters, downloader=downloader)


def test_filter_ids_for_language() -> None:
    catalog = _catalog()

    assert catalog.get_filter_ids_for_language("ru") == [1]
    assert catalog.get_filter_ids_for_language("uk-UA") == [1]
    assert catalog.get_filter_ids_for_language("pt-BR") == [9]
    assert catalog.get_filter_ids_for_language("zh-TW") == [224, 225]
    assert catalog.get_filter_ids_for_language("zh_CN") == [224]
    assert catalog.get_filter_ids_for_language("en") == []
    assert catalog.get_filter_ids_for_language("") == []


def test_group_has_enabled_status() -> None:
    catalog = _catalog()

    assert not catalog.group_has_enabled_status(7)
    catalog.apply_group_state_info(7, StateInfo(enabled=False))
    assert catalog.group_has_enabled_status(7)
    assert catalog.get_group(7).state is GroupState.DISABLED
    assert not catalog.group_has_enabled_status(404)


def test_register_custom_filter_assigns_fresh_ids() -> None:
    catalog = _catalog()
    info = CustomFilterInfo("First", "desc", None, "1.0", None, rules_count=1)

    first = catalog.register_custom_filter("https://example.org/a.txt", info)
    second = catalog.register_custom_filter("https://example.org/b.txt", info)
    again = catalog.register_custom_filter("https://example.org/a.txt", info)

    assert first.filter_id == CUSTOM_FILTERS_START_ID
    assert second.filter_id == CUSTOM_FILTERS_START_ID + 1
    assert again is first
    assert first.group_id == AntiBannerFilterGroupsId.CUSTOM_ID
    assert first.is_custom


def test_restore_custom_filters_keeps_existing_ids() -> None:
    catalog = _catalog()
    restored = Filter(
        filter_id=1005,
        group_id=AntiBannerFilterGroupsId.CUSTOM_ID,
        name="Restored",
        custom_url="https://example.org/r.txt",
        removed=True,
    )

    catalog.restore_custom_filters([restored])
    info = CustomFilterInfo(None, None, None, None, None, rules_count=1)
    fresh = catalog.register_custom_filter("https://example.org/new.txt", info)

    assert catalog.get_filter(1005) is restored
    assert fresh.filter_id == 1006
    assert fresh.name == "https://example.org/new.txt"


def test_update_custom_filter_parses_header() -> None:
    lines = ["! Title: Example", "! Homepage: https://example.org", "||tracker.example^", ""]
    catalog = _catalog(FakeDownloader(lines))

    filter_id = asyncio.run(catalog.update_custom_filter("https://example.org/list.txt"))

    filter = catalog.get_filter(filter_id)
    assert filter.name == "Example"
    assert filter.homepage == "https://example.org"
    assert filter.custom_url == "https://example.org/list.txt"


def test_update_custom_filter_rejects_failed_or_empty_downloads() -> None:
    assert asyncio.run(_catalog(FakeDownloader(None)).update_custom_filter("https://x")) is None
    assert asyncio.run(_catalog(FakeDownloader(["! Title: Empty"])).update_custom_filter("https://x")) is None
    assert asyncio.run(_catalog().update_custom_filter("https://x")) is None


def test_mark_and_clear_removed() -> None:
    catalog = _catalog()
    catalog.set_filter_enabled(1, True)
    catalog.set_filter_installed(1, True)

    filter = catalog.mark_filter_removed(1)
    assert filter.removed and not filter.enabled and not filter.installed

    catalog.clear_filter_removed(1)
    assert not catalog.get_filter(1).removed


def test_mutating_unknown_ids_raises_domain_errors() -> None:
    catalog = _catalog()

    with pytest.raises(FilterNotFoundError):
        catalog.set_filter_enabled(404, True)
    with pytest.raises(GroupNotFoundError):
        catalog.set_group_state(404, GroupState.ENABLED)
    with pytest.raises(FilterSyncError):
        catalog.mark_filter_removed(404)
