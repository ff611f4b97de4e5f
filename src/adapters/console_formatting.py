"""Console formatting helpers for the CLI.

Keeping formatting here keeps the command handlers short and the listing
consistent between commands.
"""

from __future__ import annotations

from core.models import Category, FilterView, Group


def format_status(view: FilterView) -> str:
    """Return a compact flag column, e.g. ``[EI-]``."""

    filter = view.filter
    flags = [
        "E" if filter.enabled else "-",
        "I" if filter.installed else "-",
        "L" if filter.loaded else "-",
    ]
    return f"[{''.join(flags)}]"


def format_filter_line(view: FilterView) -> str:
    filter = view.filter
    parts = [format_status(view), f"{filter.filter_id:>5}", filter.name]
    if filter.version:
        parts.append(f"v{filter.version}")
    if view.tags_details:
        parts.append("#" + " #".join(tag.keyword for tag in view.tags_details))
    if filter.is_custom:
        parts.append(f"<{filter.custom_url}>")
    return "  ".join(parts)


def format_group_header(group: Group) -> str:
    state = group.state.value.replace("_", " ")
    return f"{group.name} (group {group.group_id}, {state})"


def format_category(category: Category) -> str:
    """Return a group header followed by one indented line per filter."""

    lines = [format_group_header(category.group)]
    if not category.filters:
        lines.append("    (no filters)")
    for view in category.filters:
        lines.append(f"    {format_filter_line(view)}")
    return "\n".join(lines)
