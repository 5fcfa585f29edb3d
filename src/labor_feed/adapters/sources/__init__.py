"""Source adapters for fetching items."""

from typing import Optional

from labor_feed.adapters.http_client import HttpFetcher
from labor_feed.adapters.sources.nyc_council_source import NYCCouncilSource
from labor_feed.adapters.sources.page_sources import (
    CityRecordSource,
    ListingPageSource,
    NYCRulesSource,
    NYSDOLSource,
    NYSRegisterSource,
    PageTextSource,
)
from labor_feed.config import Settings
from labor_feed.core import ItemSource

__all__ = [
    "NYCCouncilSource",
    "NYCRulesSource",
    "CityRecordSource",
    "NYSRegisterSource",
    "NYSDOLSource",
    "ListingPageSource",
    "PageTextSource",
    "build_sources",
]


def build_sources(settings: Settings, fetcher: Optional[HttpFetcher] = None) -> list[ItemSource]:
    """Create enabled sources in their fixed invocation order."""
    fetcher = fetcher or HttpFetcher(
        timeout=settings.http.timeout,
        user_agent=settings.http.user_agent,
    )
    sources: list[ItemSource] = []

    for key, source_class in (
        ("nyc_council", NYCCouncilSource),
        ("nyc_rules", NYCRulesSource),
        ("city_record", CityRecordSource),
        ("nys_register", NYSRegisterSource),
        ("nys_dol", NYSDOLSource),
    ):
        config = settings.source(key)
        if not config.enabled:
            continue

        kwargs: dict = {"fetcher": fetcher}
        if config.max_items is not None:
            kwargs["max_items"] = config.max_items

        if source_class is NYCRulesSource:
            # Search terms are sent upstream instead of matched locally
            if config.keywords:
                kwargs["query"] = " OR ".join(config.keywords)
        else:
            kwargs["keywords"] = config.keywords

        sources.append(source_class(**kwargs))

    return sources
