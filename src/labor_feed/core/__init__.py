"""Core domain layer."""

from labor_feed.core.entities import (
    Item,
    SourceName,
    format_timestamp,
    parse_timestamp,
    truncate_title,
)
from labor_feed.core.interfaces import FeedSink, ItemSource

__all__ = [
    "Item",
    "SourceName",
    "ItemSource",
    "FeedSink",
    "format_timestamp",
    "parse_timestamp",
    "truncate_title",
]
