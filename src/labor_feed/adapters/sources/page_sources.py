"""HTML page sources that extract updates from flattened page text.

None of these pages expose stable record ids or per-record dates, so
extraction is a best-effort heuristic: ids are synthesized from the run
timestamp and position, dates fall back to the run timestamp, and links
point back at the page itself.
"""

from abc import abstractmethod
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from labor_feed.adapters.http_client import HttpFetcher
from labor_feed.adapters.sources.filters import (
    keyword_pattern,
    split_at_markers,
    split_lines,
)
from labor_feed.adapters.sources.text import flatten
from labor_feed.core import (
    Item,
    ItemSource,
    SourceName,
    format_timestamp,
    truncate_title,
)


class PageTextSource(ItemSource):
    """Base for sources scraped from a single HTML page."""

    id_prefix = "page"
    tags: tuple[str, ...] = ()
    page_url = ""

    def __init__(self, fetcher: Optional[HttpFetcher] = None, max_items: int = 10) -> None:
        self.fetcher = fetcher or HttpFetcher()
        self.max_items = max_items

    @property
    def url(self) -> str:
        """URL that is fetched."""
        return self.page_url

    async def fetch_items(self, run_at: datetime) -> list[Item]:
        html = await self.fetcher.get_text(self.url)
        records = self.extract(flatten(html))[: self.max_items]

        stamp = int(run_at.timestamp() * 1000)
        date = format_timestamp(run_at)

        return [
            Item(
                id=f"{self.id_prefix}-{stamp}-{i}",
                source=self.name,
                title=truncate_title(text),
                date=date,
                url=self.page_url,
                tags=self.tags,
            )
            for i, text in enumerate(records)
        ]

    @abstractmethod
    def extract(self, text: str) -> list[str]:
        """Pick candidate record texts out of the flattened page."""
        pass


class NYCRulesSource(PageTextSource):
    """Search results from the NYC Rules site, chunked at rule headings."""

    emoji = "📜"
    name = SourceName.NYC_RULES.value
    id_prefix = "nycr"
    tags = ("NYC", "Rules")
    page_url = "https://rules.cityofnewyork.us/"

    QUERY = "employment OR labor OR wage OR sick OR leave OR retaliation OR schedule"
    MARKERS = ["Read More", "Proposed Rule", "Adopted Rule", "Notice of Public Hearing"]

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        max_items: int = 15,
        query: Optional[str] = None,
    ) -> None:
        super().__init__(fetcher, max_items)
        self.query = query or self.QUERY

    @property
    def url(self) -> str:
        return f"{self.page_url}?s={quote(self.query)}"

    def extract(self, text: str) -> list[str]:
        # The query already filters by topic
        return split_at_markers(text, self.MARKERS)


class ListingPageSource(PageTextSource):
    """A listing page filtered sentence by sentence against keywords."""

    KEYWORDS: list[str] = []

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        max_items: int = 10,
        keywords: Optional[list[str]] = None,
    ) -> None:
        super().__init__(fetcher, max_items)
        self.keywords = keywords or self.KEYWORDS
        self.pattern = keyword_pattern(self.keywords)

    def extract(self, text: str) -> list[str]:
        return [line for line in split_lines(text) if self.pattern.search(line)]


class CityRecordSource(ListingPageSource):
    """Notices on the City Record Online front page."""

    emoji = "📰"
    name = SourceName.CITY_RECORD.value
    id_prefix = "crol"
    tags = ("NYC", "Notices")
    page_url = "https://a856-cityrecord.nyc.gov/"

    KEYWORDS = [
        "DCWP", "DCA", "DOL", "work", "wage", "employment",
        "labor", "sick", "leave", "retaliation", "schedule",
    ]


class NYSRegisterSource(ListingPageSource):
    """Rulemaking notices from the New York State Register page."""

    emoji = "📘"
    name = SourceName.NYS_REGISTER.value
    id_prefix = "nysr"
    tags = ("NYS", "Rulemaking")
    page_url = "https://dos.ny.gov/state-register"

    KEYWORDS = [
        "labor", "employment", "wage", "salary", "sick",
        "leave", "retaliation", "schedule", "minimum wage",
    ]


class NYSDOLSource(ListingPageSource):
    """News and guidance from the NYS Department of Labor home page."""

    emoji = "🏢"
    name = SourceName.NYS_DOL.value
    id_prefix = "nysdol"
    tags = ("NYS", "Guidance")
    page_url = "https://dol.ny.gov/"

    KEYWORDS = [
        "news", "press", "wage", "overtime",
        "salary transparency", "leave", "retaliation", "work",
    ]

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        max_items: int = 8,
        keywords: Optional[list[str]] = None,
    ) -> None:
        super().__init__(fetcher, max_items, keywords)
