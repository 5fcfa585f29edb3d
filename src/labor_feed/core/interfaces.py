"""Core interfaces for adapters."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from labor_feed.core.entities import Item

logger = logging.getLogger(__name__)


class ItemSource(ABC):
    """Interface for pulling items from one upstream source.

    Subclasses implement `fetch_items`, which may raise. Callers use
    `pull`, which never does.
    """

    emoji = "🔍"
    name = "source"

    @abstractmethod
    async def fetch_items(self, run_at: datetime) -> list[Item]:
        """Fetch and normalize items for a run started at `run_at`."""
        pass

    async def pull(self, run_at: datetime) -> list[Item]:
        """Fetch items, returning an empty list on any failure."""
        try:
            items = await self.fetch_items(run_at)
        except Exception as e:
            logger.warning("%s: %s", self.name, e)
            return []

        logger.info("%s: %d items", self.name, len(items))
        return items


class FeedSink(ABC):
    """Interface for persisting the aggregated feed."""

    @abstractmethod
    def write(self, items: list[Item], path: Path) -> None:
        """Persist items in order."""
        pass
