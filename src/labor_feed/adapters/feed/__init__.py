"""Feed output adapters."""

from labor_feed.adapters.feed.json_writer import JsonFeedWriter

__all__ = ["JsonFeedWriter"]
