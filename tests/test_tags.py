from __future__ import annotations

from core.models import Filter, Tag
from core.tags import TagCatalog, format_tag_keyword


def test_format_tag_keyword() -> None:
    assert format_tag_keyword("lang:en") == "lang:en"
    assert format_tag_keyword("group:custom") == "custom"
    assert format_tag_keyword("recommended") == "recommended"
    assert format_tag_keyword("reference:101") is None


def test_format_tags_details_leaves_catalog_tags_untouched() -> None:
    tag = Tag(42, "purpose:ads")
    catalog = TagCatalog([tag, Tag(43, "reference:7")])
    filter = Filter(filter_id=1, group_id=1, name="Base", tags=(42, 43, 404))

    first = catalog.format_tags_details(filter)
    second = catalog.format_tags_details(filter)

    assert [detail.keyword for detail in first] == ["ads"]
    assert first == second
    assert catalog.get_tag(42).keyword == "purpose:ads"


def test_recommended_and_mobile_predicates() -> None:
    catalog = TagCatalog([Tag(10, "recommended"), Tag(19, "platform:mobile")])
    recommended = Filter(filter_id=1, group_id=1, name="Base", tags=(10,))
    mobile = Filter(filter_id=2, group_id=1, name="Mobile", tags=(19,))

    assert catalog.is_recommended_filter(recommended)
    assert not catalog.is_mobile_filter(recommended)
    assert catalog.is_mobile_filter(mobile)
    assert not catalog.is_recommended_filter(mobile)
