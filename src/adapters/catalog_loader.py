"""Loads the static filters catalog shipped with the application.

The catalog file follows the filters metadata layout: ``groups``, ``filters``
and ``tags`` arrays with camelCase keys.
"""

from __future__ import annotations

import json
from typing import Any

from core.models import Filter, Group, Tag


def _build_group(entry: dict[str, Any]) -> Group:
    return Group(
        group_id=int(entry["groupId"]),
        name=entry.get("groupName", ""),
        display_number=int(entry.get("displayNumber", 0)),
    )


def _build_filter(entry: dict[str, Any]) -> Filter:
    return Filter(
        filter_id=int(entry["filterId"]),
        group_id=int(entry["groupId"]),
        name=entry.get("name", ""),
        description=entry.get("description", ""),
        homepage=entry.get("homepage", ""),
        subscription_url=entry.get("subscriptionUrl", ""),
        tags=tuple(int(tag_id) for tag_id in entry.get("tags", []) or []),
        languages=tuple(entry.get("languages", []) or []),
        display_number=int(entry.get("displayNumber", 0)),
        version=entry.get("version"),
    )


def _build_tag(entry: dict[str, Any]) -> Tag:
    return Tag(tag_id=int(entry["tagId"]), keyword=entry["keyword"])


def parse_catalog(data: dict[str, Any]) -> tuple[list[Group], list[Filter], list[Tag]]:
    groups = [_build_group(entry) for entry in data.get("groups", [])]
    filters = [_build_filter(entry) for entry in data.get("filters", [])]
    tags = [_build_tag(entry) for entry in data.get("tags", [])]
    return groups, filters, tags


def load_catalog(path: str) -> tuple[list[Group], list[Filter], list[Tag]]:
    """Read the catalog file and return (groups, filters, tags)."""

    with open(path, "r", encoding="utf-8") as handle:
        return parse_catalog(json.load(handle))
