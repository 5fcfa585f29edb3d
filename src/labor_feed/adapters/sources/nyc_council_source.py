"""NYC Council legislation from the Legistar web API."""

import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from labor_feed.adapters.http_client import HttpFetcher
from labor_feed.adapters.sources.filters import join_fields, matches_keywords
from labor_feed.core import (
    Item,
    ItemSource,
    SourceName,
    format_timestamp,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


class NYCCouncilSource(ItemSource):
    """Fetch recently modified Council matters that touch on employment."""

    emoji = "🏛️"
    name = SourceName.NYC_COUNCIL.value

    KEYWORDS = [
        "employment", "labor", "wage", "salary", "sick", "safe",
        "leave", "retaliation", "schedule", "pay", "overtime",
    ]

    # Concatenated for keyword matching
    MATCH_FIELDS = (
        "MatterName", "MatterTitle", "MatterTypeName",
        "MatterStatusName", "MatterBodyName", "MatterFile",
    )

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        max_items: int = 15,
        keywords: Optional[list[str]] = None,
        page_size: int = 25,
    ) -> None:
        self.fetcher = fetcher or HttpFetcher()
        self.max_items = max_items
        self.keywords = keywords or self.KEYWORDS
        self.page_size = page_size
        self.api_url = "https://webapi.legistar.com/v1/nyc/Matters"
        self.detail_url = "https://legistar.council.nyc.gov/LegislationDetail.aspx"

    @property
    def url(self) -> str:
        order = quote("LastModifiedUtc desc")
        return f"{self.api_url}?$orderby={order}&$top={self.page_size}"

    async def fetch_items(self, run_at: datetime) -> list[Item]:
        """Fetch matters and keep those matching the topic keywords."""
        data = await self.fetcher.get_json(self.url)

        if not isinstance(data, list):
            raise ValueError(f"expected a list of matters, got {type(data).__name__}")

        items: list[Item] = []
        skipped = 0

        for index, matter in enumerate(data):
            if len(items) >= self.max_items:
                break

            if not isinstance(matter, dict):
                skipped += 1
                continue

            blob = join_fields(matter.get(f) for f in self.MATCH_FIELDS)
            if not matches_keywords(blob, self.keywords):
                continue

            item = self._create_item(matter, index, run_at)
            if item:
                items.append(item)
            else:
                skipped += 1

        if skipped:
            logger.debug("%s: skipped %d malformed matters", self.name, skipped)

        return items

    def _create_item(self, matter: dict, index: int, run_at: datetime) -> Optional[Item]:
        """Map a Legistar matter onto an Item."""
        title = ""
        for key in ("MatterTitle", "MatterName", "MatterFile"):
            title = str(matter.get(key) or "").strip()
            if title:
                break
        if not title:
            return None

        matter_id = matter.get("MatterId")
        if matter_id is not None:
            item_id = f"nycc-{matter_id}"
            url = matter.get("MatterHyperlink") or f"{self.detail_url}?ID={matter_id}"
        else:
            item_id = f"nycc-{int(run_at.timestamp() * 1000)}-{index}"
            url = matter.get("MatterHyperlink") or self.detail_url

        updated = (
            parse_timestamp(matter.get("LastModifiedUtc"))
            or parse_timestamp(matter.get("MatterIntroDate"))
            or run_at
        )

        return Item(
            id=item_id,
            source=self.name,
            title=title,
            date=format_timestamp(updated),
            url=url,
            tags=("NYC",),
        )
