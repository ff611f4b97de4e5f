"""Core configuration constants and dataclasses.

We keep config parsing outside the core, but these definitions fix the ids
and shapes the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


class AntiBannerFilterGroupsId:
    """Static group ids shipped with the filters catalog."""

    CUSTOM_ID = 0
    AD_BLOCKING_ID = 1
    PRIVACY_ID = 2
    SOCIAL_ID = 3
    ANNOYANCES_ID = 4
    SECURITY_ID = 5
    OTHER_ID = 6
    LANGUAGE_SPECIFIC_ID = 7


class AntiBannerFiltersId:
    """Static filter ids the application refers to directly."""

    ENGLISH_FILTER_ID = 2
    TRACKING_FILTER_ID = 3
    SOCIAL_FILTER_ID = 4
    SEARCH_AND_SELF_PROMO_FILTER_ID = 10
    SAFARI_FILTER_ID = 12


RECOMMENDED_TAG_ID = 10
MOBILE_TAG_ID = 19

# Ids below this value are reserved for filters from the static catalog.
CUSTOM_FILTERS_START_ID = 1000

# Groups offered on first run, in display order.
OFFERED_GROUP_IDS = (
    AntiBannerFilterGroupsId.AD_BLOCKING_ID,
    AntiBannerFilterGroupsId.PRIVACY_ID,
    AntiBannerFilterGroupsId.OTHER_ID,
    AntiBannerFilterGroupsId.LANGUAGE_SPECIFIC_ID,
)


@dataclass(frozen=True)
class LoaderConfig:
    """Download settings consumed by the filter loader adapter."""

    timeout: int
    retries: int
    update_period_hours: int
    filter_url_template: str
