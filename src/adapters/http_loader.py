"""HTTP filter loader adapter.

Downloads filter bodies with aiohttp, stores them as plain rule files and
records version info. Implements both FilterLoaderPort and
CustomFilterDownloaderPort.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import Optional

import aiofiles
import aiohttp

from adapters.sqlite_state_store import SQLiteFilterStateStore
from core.config import LoaderConfig
from core.headers import parse_filter_header
from core.models import Filter, VersionInfo
from core.subscriptions import SubscriptionCatalog

LOGGER = logging.getLogger(__name__)


class HttpFilterLoader:
    """Sequential filter downloader sharing one update channel."""

    def __init__(
        self,
        config: LoaderConfig,
        rules_dir: str,
        store: SQLiteFilterStateStore,
        catalog: Optional[SubscriptionCatalog] = None,
    ) -> None:
        self._config = config
        self._rules_dir = rules_dir
        self._store = store
        self._catalog = catalog

    def bind(self, catalog: SubscriptionCatalog) -> None:
        """Attach the catalog once it exists; it needs this loader to be built first."""

        self._catalog = catalog

    def filter_url(self, filter: Filter) -> str:
        if filter.custom_url:
            return filter.custom_url
        if filter.subscription_url:
            return filter.subscription_url
        return self._config.filter_url_template.format(filter_id=filter.filter_id)

    def rules_path(self, filter_id: int) -> str:
        return os.path.join(self._rules_dir, f"{filter_id}.txt")

    async def _fetch_text(self, url: str, force: bool) -> Optional[str]:
        headers = {"Cache-Control": "no-cache"} if force else {}
        timeout = aiohttp.ClientTimeout(total=self._config.timeout)
        retries = max(self._config.retries, 1)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            for attempt in range(retries):
                try:
                    async with session.get(url, headers=headers, allow_redirects=True) as response:
                        if response.status < 400:
                            return await response.text(errors="replace")
                        LOGGER.warning("HTTP %s while downloading %s", response.status, url)
                except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                    LOGGER.warning("Download of %s failed: %s", url, exc)

                if attempt < retries - 1:
                    await asyncio.sleep(2 ** attempt)
        return None

    async def download(self, url: str) -> Optional[list[str]]:
        """Return the lines of the list at ``url``, or None on failure."""

        text = await self._fetch_text(url, force=True)
        if text is None:
            return None
        return text.splitlines()

    async def load_filter_rules(self, filter: Filter, force: bool) -> bool:
        """Download and store the rules of one filter.

        Failures are reported as False and never raised.
        """

        url = self.filter_url(filter)
        LOGGER.info("Loading rules for filter %s from %s", filter.filter_id, url)
        text = await self._fetch_text(url, force)
        if text is None:
            return False

        os.makedirs(self._rules_dir, exist_ok=True)
        async with aiofiles.open(self.rules_path(filter.filter_id), "w", encoding="utf-8") as handle:
            await handle.write(text)

        header = parse_filter_header(text.splitlines())
        now = time.time()
        version_info = VersionInfo(
            version=header.version or filter.version,
            last_check_time=now,
            last_update_time=now,
        )
        self._store.set_filter_version(filter.filter_id, version_info)
        if self._catalog is not None:
            self._catalog.apply_version_info(filter.filter_id, version_info)
            self._catalog.set_filter_loaded(filter.filter_id, True)
        LOGGER.info(
            "Filter %s loaded: version=%s, rules=%s",
            filter.filter_id,
            version_info.version,
            header.rules_count,
        )
        return True

    def _is_update_due(self, filter: Filter, now: float) -> bool:
        if filter.last_check_time is None:
            return True
        return now - filter.last_check_time >= self._config.update_period_hours * 3600

    async def check_anti_banner_filters_update(self, force_update: bool) -> list[int]:
        """Reload installed, enabled filters one at a time.

        Without ``force_update`` only filters whose update period elapsed are
        reloaded. Returns the ids that were refreshed.
        """

        if self._catalog is None:
            return []

        now = time.time()
        candidates = [
            filter
            for filter in self._catalog.get_filters()
            if filter.installed and filter.enabled and not filter.removed
            and (force_update or self._is_update_due(filter, now))
        ]

        updated: list[int] = []
        for filter in candidates:
            if await self.load_filter_rules(filter, force_update):
                updated.append(filter.filter_id)
        LOGGER.info("Filters update checked: %s of %s refreshed", len(updated), len(candidates))
        return updated
