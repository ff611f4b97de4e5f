"""Application entry point for the filtersync command line."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint

import settings
from adapters.catalog_loader import load_catalog
from adapters.console_formatting import format_category, format_filter_line
from adapters.http_loader import HttpFilterLoader
from adapters.platform import PlatformInfo
from adapters.sqlite_state_store import SQLiteFilterStateStore
from core.categories import CategorySelector
from core.errors import FilterSyncError
from core.events import EventBus, EventKind
from core.manager import FiltersManager
from core.models import Filter
from core.subscriptions import SubscriptionCatalog
from core.tags import TagCatalog

NAME = "FILTERSYNC"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/filtersync.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


@dataclass
class _Runtime:
    manager: FiltersManager
    selector: CategorySelector


def _log_event(kind: EventKind, payload: Any) -> None:
    identifier = getattr(payload, "filter_id", None)
    if identifier is None:
        identifier = getattr(payload, "group_id", None)
    logging.getLogger(__name__).info("%s -> %s", kind.name, identifier)


def _build_runtime() -> _Runtime:
    """Wire adapters and core services from settings."""

    db_directory = os.path.dirname(settings.DB_PATH)
    if db_directory:
        os.makedirs(db_directory, exist_ok=True)
    store = SQLiteFilterStateStore(settings.DB_PATH)
    store.init_db()

    # The store listens first so state is persisted before anything else reacts.
    bus = EventBus()
    store.attach(bus)
    bus.add_listener(_log_event)

    groups, filters, tags = load_catalog(settings.CATALOG_PATH)
    loader = HttpFilterLoader(settings.LOADER, settings.RULES_DIR, store)
    catalog = SubscriptionCatalog(groups, filters, downloader=loader)
    catalog.restore_custom_filters(store.list_custom_filters())
    loader.bind(catalog)

    platform = PlatformInfo.from_settings(settings.LOCALE, settings.USER_AGENT)
    selector = CategorySelector(catalog, TagCatalog(tags), platform)
    manager = FiltersManager(catalog, selector, store, loader, bus)

    # Project persisted state onto the catalog before any command runs.
    manager.get_filters()
    manager.get_groups()
    return _Runtime(manager=manager, selector=selector)


def _list(runtime: _Runtime) -> None:
    metadata = runtime.selector.get_filters_metadata()
    for category in metadata.categories:
        print(format_category(category))
        print()


async def _offer(runtime: _Runtime) -> None:
    for group_id in runtime.manager.offer_groups_and_filters():
        await runtime.manager.enable_filters_group(group_id)


async def _add_custom(runtime: _Runtime, url: str) -> int:
    added: list[Filter] = []

    def _on_error() -> None:
        print(f"Could not load custom filter from {url}", file=sys.stderr)

    await runtime.manager.load_custom_filter(url, added.append, _on_error)
    if not added:
        return 1

    filter = added[0]
    # Installing the filter also persists it as a custom filter.
    await runtime.manager.add_and_enable_filters([filter.filter_id])
    for view in runtime.selector.get_visible_filters():
        if view.filter.filter_id == filter.filter_id:
            print(format_filter_line(view))
    return 0


async def _update(runtime: _Runtime, force: bool) -> None:
    updated = await runtime.manager.check_anti_banner_filters_update(force)
    print(f"Updated filters: {', '.join(map(str, updated)) or 'none'}")


def _dispatch(args: argparse.Namespace) -> int:
    runtime = _build_runtime()
    manager = runtime.manager

    if args.command == "offer":
        asyncio.run(_offer(runtime))
    elif args.command == "enable":
        asyncio.run(manager.add_and_enable_filters(args.filter_ids))
    elif args.command == "disable":
        manager.disable_filters(args.filter_ids)
    elif args.command == "enable-group":
        asyncio.run(manager.enable_filters_group(args.group_id))
    elif args.command == "disable-group":
        manager.disable_filters_group(args.group_id)
    elif args.command == "add-custom":
        return asyncio.run(_add_custom(runtime, args.url))
    elif args.command == "remove":
        manager.remove_filter(args.filter_id)
    elif args.command == "update":
        asyncio.run(_update(runtime, args.force))
    else:
        _list(runtime)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="filtersync")
    parser.add_argument("--quiet", action="store_true", help="Do not print the banner")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="Show groups and their visible filters")
    subparsers.add_parser("offer", help="Enable the onboarding groups and their recommended filters")

    enable = subparsers.add_parser("enable", help="Install and enable filters one by one")
    enable.add_argument("filter_ids", nargs="+", type=int)
    disable = subparsers.add_parser("disable", help="Disable enabled filters")
    disable.add_argument("filter_ids", nargs="+", type=int)

    enable_group = subparsers.add_parser("enable-group", help="Enable a group")
    enable_group.add_argument("group_id", type=int)
    disable_group = subparsers.add_parser("disable-group", help="Disable a group")
    disable_group.add_argument("group_id", type=int)

    add_custom = subparsers.add_parser("add-custom", help="Add a filter list from a URL")
    add_custom.add_argument("url")
    remove = subparsers.add_parser("remove", help="Remove a custom filter")
    remove.add_argument("filter_id", type=int)

    update = subparsers.add_parser("update", help="Check installed filters for updates")
    update.add_argument("--force", action="store_true", help="Ignore the update period")

    args = parser.parse_args(argv)
    if not args.quiet:
        _print_banner()
    _configure_logging()

    try:
        return _dispatch(args)
    except FilterSyncError as exc:
        logging.getLogger(__name__).error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
