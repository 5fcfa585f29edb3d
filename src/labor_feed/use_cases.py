"""Business logic use cases."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from labor_feed.core import FeedSink, Item, ItemSource, parse_timestamp

logger = logging.getLogger(__name__)


def dedupe(items: list[Item]) -> list[Item]:
    """Drop items whose (source, title) key was already seen.

    The first occurrence wins, so earlier sources take precedence.
    """
    seen: set[tuple[str, str]] = set()
    unique: list[Item] = []

    for item in items:
        if item.dedup_key in seen:
            continue
        seen.add(item.dedup_key)
        unique.append(item)

    return unique


def sort_by_recency(items: list[Item]) -> list[Item]:
    """Order items newest first.

    Items with unparsable dates go after all dated items. The sort is
    stable, so ties keep their incoming order.
    """
    def key(item: Item) -> tuple[int, float]:
        moment = parse_timestamp(item.date)
        if moment is None:
            return (1, 0.0)
        return (0, -moment.timestamp())

    return sorted(items, key=key)


class AggregationService:
    """Service for merging items from all sources into one ordered feed."""

    def __init__(self, sources: list[ItemSource], concurrent: bool = True) -> None:
        self.sources = sources
        self.concurrent = concurrent

    async def aggregate(self, run_at: Optional[datetime] = None) -> list[Item]:
        """Pull every source, then dedupe and sort the combined items."""
        run_at = run_at or datetime.now(timezone.utc)
        batches = await self.collect(run_at)

        all_items = [item for batch in batches for item in batch]
        unique = dedupe(all_items)

        dropped = len(all_items) - len(unique)
        if dropped:
            logger.info("Dropped %d duplicate items", dropped)

        return sort_by_recency(unique)

    async def collect(self, run_at: datetime) -> list[list[Item]]:
        """Pull all sources, returning one batch per source in source order."""
        if self.concurrent:
            # gather keeps argument order regardless of completion order
            return list(await asyncio.gather(*(s.pull(run_at) for s in self.sources)))

        batches = []
        for source in self.sources:
            batches.append(await source.pull(run_at))
        return batches


class FeedService:
    """Service for building the feed and handing it to a sink."""

    def __init__(self, aggregator: AggregationService, sink: FeedSink) -> None:
        self.aggregator = aggregator
        self.sink = sink

    async def build(self, output_path: Path, run_at: Optional[datetime] = None) -> list[Item]:
        """Aggregate all sources and persist the complete result.

        Nothing is written if aggregation raises.
        """
        items = await self.aggregator.aggregate(run_at)
        self.sink.write(items, output_path)
        return items
