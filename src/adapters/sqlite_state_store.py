"""SQLite filter state adapter.

Implements the core FilterStatePort using a simple SQLite database and
persists state transitions by listening on the event bus.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from core.config import AntiBannerFilterGroupsId
from core.events import EventBus, EventKind
from core.models import Filter, Group, GroupState, StateInfo, VersionInfo

LOGGER = logging.getLogger(__name__)


class SQLiteFilterStateStore:
    """Thin SQLite wrapper that satisfies the FilterStatePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - filters_version: version info written by the filter loader
        - filters_state: enabled/installed/loaded flags per filter
        - groups_state: enabled flag per explicitly toggled group
        - custom_filters: user added filters, kept across sessions
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS filters_version (
                    filter_id INTEGER PRIMARY KEY,
                    version TEXT,
                    last_check_time REAL,
                    last_update_time REAL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS filters_state (
                    filter_id INTEGER PRIMARY KEY,
                    enabled INTEGER NOT NULL DEFAULT 0,
                    installed INTEGER NOT NULL DEFAULT 0,
                    loaded INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            # A group without a row here has never been toggled.
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS groups_state (
                    group_id INTEGER PRIMARY KEY,
                    enabled INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS custom_filters (
                    filter_id INTEGER PRIMARY KEY,
                    url TEXT NOT NULL UNIQUE,
                    name TEXT,
                    description TEXT,
                    homepage TEXT,
                    removed INTEGER NOT NULL DEFAULT 0
                )
                """
            )

    def get_filters_version(self) -> dict[int, VersionInfo]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM filters_version").fetchall()
        return {
            int(row["filter_id"]): VersionInfo(
                version=row["version"],
                last_check_time=row["last_check_time"],
                last_update_time=row["last_update_time"],
            )
            for row in rows
        }

    def get_filters_state(self) -> dict[int, StateInfo]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM filters_state").fetchall()
        return {
            int(row["filter_id"]): StateInfo(
                enabled=bool(row["enabled"]),
                installed=bool(row["installed"]),
                loaded=bool(row["loaded"]),
            )
            for row in rows
        }

    def get_group_state(self) -> dict[int, StateInfo]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM groups_state").fetchall()
        return {int(row["group_id"]): StateInfo(enabled=bool(row["enabled"])) for row in rows}

    def set_filter_version(self, filter_id: int, info: VersionInfo) -> None:
        """Upsert the version record of a filter."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO filters_version (filter_id, version, last_check_time, last_update_time)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(filter_id) DO UPDATE SET
                    version = excluded.version,
                    last_check_time = excluded.last_check_time,
                    last_update_time = excluded.last_update_time
                """,
                (filter_id, info.version, info.last_check_time, info.last_update_time),
            )

    def set_filter_state(self, filter_id: int, info: StateInfo) -> None:
        """Upsert the flags of a filter."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO filters_state (filter_id, enabled, installed, loaded)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(filter_id) DO UPDATE SET
                    enabled = excluded.enabled,
                    installed = excluded.installed,
                    loaded = excluded.loaded
                """,
                (filter_id, int(info.enabled), int(info.installed), int(info.loaded)),
            )

    def set_group_state(self, group_id: int, enabled: bool) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO groups_state (group_id, enabled)
                VALUES (?, ?)
                ON CONFLICT(group_id) DO UPDATE SET enabled = excluded.enabled
                """,
                (group_id, int(enabled)),
            )

    def save_custom_filter(self, filter: Filter) -> None:
        """Upsert a custom filter row, including its removed flag."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO custom_filters (filter_id, url, name, description, homepage, removed)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(filter_id) DO UPDATE SET
                    url = excluded.url,
                    name = excluded.name,
                    description = excluded.description,
                    homepage = excluded.homepage,
                    removed = excluded.removed
                """,
                (
                    filter.filter_id,
                    filter.custom_url,
                    filter.name,
                    filter.description,
                    filter.homepage,
                    int(filter.removed),
                ),
            )

    def list_custom_filters(self) -> list[Filter]:
        """Return persisted custom filters as catalog objects."""

        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM custom_filters ORDER BY filter_id").fetchall()
        return [
            Filter(
                filter_id=int(row["filter_id"]),
                group_id=AntiBannerFilterGroupsId.CUSTOM_ID,
                name=row["name"] or row["url"],
                description=row["description"] or "",
                homepage=row["homepage"] or "",
                subscription_url=row["url"],
                display_number=int(row["filter_id"]),
                custom_url=row["url"],
                removed=bool(row["removed"]),
            )
            for row in rows
        ]

    def attach(self, bus: EventBus) -> None:
        """Persist every committed transition published on the bus."""

        bus.add_listener(self._on_event)

    def _on_event(self, kind: EventKind, payload: Any) -> None:
        if kind is EventKind.FILTER_GROUP_ENABLE_DISABLE:
            group: Group = payload
            if group.state is not GroupState.NEVER_TOGGLED:
                self.set_group_state(group.group_id, group.enabled)
            return

        filter: Filter = payload
        self.set_filter_state(
            filter.filter_id,
            StateInfo(enabled=filter.enabled, installed=filter.installed, loaded=filter.loaded),
        )
        if kind is EventKind.FILTER_ADD_REMOVE and filter.is_custom:
            self.save_custom_filter(filter)
        LOGGER.debug("Persisted %s for filter %s", kind.name, filter.filter_id)

