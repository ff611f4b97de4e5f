"""Tag catalog and tag display helpers (core domain)."""

from __future__ import annotations

from typing import Iterable, Optional

from core.config import MOBILE_TAG_ID, RECOMMENDED_TAG_ID
from core.models import Filter, Tag, TagDetails

HIDDEN_TAG_PREFIX = "reference:"
KEPT_TAG_PREFIX = "lang:"


def format_tag_keyword(keyword: str) -> Optional[str]:
    """Return the displayed keyword, or None when the tag is hidden.

    ``reference:`` tags are hidden, ``lang:`` tags keep their prefix and any
    other ``namespace:`` prefix is stripped.
    """

    if keyword.startswith(HIDDEN_TAG_PREFIX):
        return None
    if keyword.startswith(KEPT_TAG_PREFIX):
        return keyword
    return keyword[keyword.find(":") + 1:]


class TagCatalog:
    """Read-only lookup of tags shipped with the filters catalog."""

    def __init__(
        self,
        tags: Iterable[Tag],
        recommended_tag_id: int = RECOMMENDED_TAG_ID,
        mobile_tag_id: int = MOBILE_TAG_ID,
    ) -> None:
        self._tags = {tag.tag_id: tag for tag in tags}
        self._recommended_tag_id = recommended_tag_id
        self._mobile_tag_id = mobile_tag_id

    def get_tags(self) -> list[Tag]:
        return list(self._tags.values())

    def get_tag(self, tag_id: int) -> Optional[Tag]:
        return self._tags.get(tag_id)

    def is_recommended_filter(self, filter: Filter) -> bool:
        return self._recommended_tag_id in filter.tags

    def is_mobile_filter(self, filter: Filter) -> bool:
        return self._mobile_tag_id in filter.tags

    def format_tags_details(self, filter: Filter) -> tuple[TagDetails, ...]:
        """Build display tags for a filter without touching catalog tags."""

        details: list[TagDetails] = []
        for tag_id in filter.tags:
            tag = self._tags.get(tag_id)
            if tag is None:
                continue
            keyword = format_tag_keyword(tag.keyword)
            if keyword is None:
                continue
            details.append(TagDetails(tag_id=tag.tag_id, keyword=keyword))
        return tuple(details)
