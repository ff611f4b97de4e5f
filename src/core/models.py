"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage or network specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class GroupState(Enum):
    """Enabled state of a group.

    NEVER_TOGGLED is distinct from DISABLED: a group in that state has its
    recommended filters seeded the first time it is enabled.
    """

    NEVER_TOGGLED = "never_toggled"
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def from_flag(cls, enabled: Optional[bool]) -> "GroupState":
        if enabled is None:
            return cls.NEVER_TOGGLED
        return cls.ENABLED if enabled else cls.DISABLED


@dataclass(frozen=True)
class Tag:
    """Catalog tag, e.g. ``recommended`` or ``lang:de``."""

    tag_id: int
    keyword: str


@dataclass(frozen=True)
class TagDetails:
    """Display annotation derived from a Tag."""

    tag_id: int
    keyword: str


@dataclass(frozen=True)
class VersionInfo:
    """Persisted version record produced by the filter loader."""

    version: Optional[str]
    last_check_time: Optional[float]
    last_update_time: Optional[float]


@dataclass(frozen=True)
class StateInfo:
    """Persisted enable/install/load flags for a filter or group."""

    enabled: bool = False
    installed: bool = False
    loaded: bool = False


@dataclass
class Group:
    """Organizational category of filters."""

    group_id: int
    name: str
    display_number: int = 0
    state: GroupState = GroupState.NEVER_TOGGLED

    @property
    def enabled(self) -> bool:
        return self.state is GroupState.ENABLED


@dataclass
class Filter:
    """Filter subscription.

    Static fields come from the catalog. The flags are a projection of the
    persisted StateInfo and are only written through SubscriptionCatalog.
    """

    filter_id: int
    group_id: int
    name: str
    description: str = ""
    homepage: str = ""
    subscription_url: str = ""
    tags: tuple[int, ...] = ()
    languages: tuple[str, ...] = ()
    display_number: int = 0
    custom_url: Optional[str] = None
    enabled: bool = False
    installed: bool = False
    loaded: bool = False
    removed: bool = False
    version: Optional[str] = None
    last_check_time: Optional[float] = None
    last_update_time: Optional[float] = None

    @property
    def is_custom(self) -> bool:
        return bool(self.custom_url)


@dataclass(frozen=True)
class FilterView:
    """A visible filter together with its display tags."""

    filter: Filter
    tags_details: tuple[TagDetails, ...]


@dataclass(frozen=True)
class Category:
    """Group with the visible filters that belong to it."""

    group: Group
    filters: list[FilterView] = field(default_factory=list)


@dataclass(frozen=True)
class FiltersMetadata:
    """Visible filters plus the per-group categories built from them."""

    filters: list[FilterView]
    categories: list[Category]


@dataclass(frozen=True)
class CustomFilterInfo:
    """Header metadata of a downloaded custom filter list."""

    title: Optional[str]
    description: Optional[str]
    homepage: Optional[str]
    version: Optional[str]
    time_updated: Optional[str]
    rules_count: int
