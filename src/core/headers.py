"""Filter list header parsing (core domain)."""

from __future__ import annotations

from typing import Iterable, Optional

from core.models import CustomFilterInfo

# Headers are only looked for in the leading comment block.
MAX_HEADER_LINES = 50


def _parse_tag(tag_name: str, lines: list[str]) -> Optional[str]:
    prefix = f"! {tag_name}:"
    for line in lines[:MAX_HEADER_LINES]:
        if line.startswith(prefix):
            value = line[len(prefix):].strip()
            return value or None
    return None


def parse_filter_header(raw_lines: Iterable[str]) -> CustomFilterInfo:
    """Extract the ``! Key: value`` metadata of a filter list.

    The rule count ignores comments, the "[Adblock Plus 2.0]" style marker
    and blank lines.
    """

    lines = [line.strip() for line in raw_lines]
    rules_count = sum(1 for line in lines if line and not line.startswith(("!", "[")))
    return CustomFilterInfo(
        title=_parse_tag("Title", lines),
        description=_parse_tag("Description", lines),
        homepage=_parse_tag("Homepage", lines),
        version=_parse_tag("Version", lines),
        time_updated=_parse_tag("TimeUpdated", lines) or _parse_tag("Last modified", lines),
        rules_count=rules_count,
    )
