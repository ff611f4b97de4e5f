"""Filter categories and recommendation selection (core domain)."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from core.config import AntiBannerFiltersId
from core.models import Category, Filter, FiltersMetadata, FilterView
from core.ports import PlatformPort
from core.subscriptions import SubscriptionCatalog
from core.tags import TagCatalog

LOGGER = logging.getLogger(__name__)

MOBILE_USER_AGENT = re.compile(r"iPhone|iPad|iPod", re.IGNORECASE)


class CategorySelector:
    """Builds the visible filter list and per-group recommendations.

    Holds no state of its own; every call reads the catalogs afresh.
    """

    def __init__(
        self,
        catalog: SubscriptionCatalog,
        tags: TagCatalog,
        platform: PlatformPort,
        platform_filter_id: int = AntiBannerFiltersId.SAFARI_FILTER_ID,
    ) -> None:
        self._catalog = catalog
        self._tags = tags
        self._platform = platform
        self._platform_filter_id = platform_filter_id

    def get_visible_filters(self) -> list[FilterView]:
        """Return non-removed filters annotated with their display tags."""

        return [
            FilterView(filter=filter, tags_details=self._tags.format_tags_details(filter))
            for filter in self._catalog.get_filters()
            if not filter.removed
        ]

    def get_filters_metadata(self) -> FiltersMetadata:
        """Return visible filters and the groups, in catalog order, that hold them."""

        filters = self.get_visible_filters()
        categories = [
            Category(
                group=group,
                filters=[view for view in filters if view.filter.group_id == group.group_id],
            )
            for group in self._catalog.get_groups()
        ]
        return FiltersMetadata(filters=filters, categories=categories)

    def _check_mobile(self, filter: Filter) -> bool:
        if not self._tags.is_mobile_filter(filter):
            return True
        user_agent = self._platform.get_user_agent()
        if not user_agent:
            return False
        return MOBILE_USER_AGENT.search(user_agent) is not None

    def is_offered_filter(
        self,
        filter: Filter,
        lang_suitable_filter_ids: Iterable[int],
        platform_filter_id: int,
    ) -> bool:
        """Decide whether a filter should be enabled for a new user.

        Precedence:
        - the platform filter is always offered;
        - filters without the recommended tag are never offered;
        - language filters must match the user locale;
        - mobile filters are only offered on mobile devices.
        """

        if filter.filter_id == platform_filter_id:
            return True
        if not self._tags.is_recommended_filter(filter):
            return False
        if filter.languages:
            if filter.filter_id not in lang_suitable_filter_ids:
                return False
        return self._check_mobile(filter)

    def get_recommended_filter_ids_by_group_id(self, group_id: int) -> list[int]:
        metadata = self.get_filters_metadata()
        category = next(
            (item for item in metadata.categories if item.group.group_id == group_id),
            None,
        )
        if category is None:
            return []

        lang_suitable = set(self._catalog.get_filter_ids_for_language(self._platform.get_locale()))
        result = [
            view.filter.filter_id
            for view in category.filters
            if self.is_offered_filter(view.filter, lang_suitable, self._platform_filter_id)
        ]
        LOGGER.debug("Recommended filters for group %s: %s", group_id, result)
        return result
