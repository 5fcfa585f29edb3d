"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class SourceName(str, Enum):
    """Human-readable origin of an item."""

    NYC_COUNCIL = "NYC Council"
    NYC_RULES = "NYC Rules"
    CITY_RECORD = "City Record"
    NYS_REGISTER = "NYS Register"
    NYS_DOL = "NYS DOL"


TITLE_LIMIT = 140
ELLIPSIS = "…"


@dataclass(frozen=True)
class Item:
    """Normalized regulatory update."""

    id: str
    source: str
    title: str
    date: str
    url: str
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in ("id", "source", "title", "date", "url"):
            if not getattr(self, name):
                raise ValueError(f"{name.capitalize()} cannot be empty")
        # Accept any iterable of tags but store an immutable tuple
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.source, self.title)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "date": self.date,
            "url": self.url,
            "tags": list(self.tags),
        }


def truncate_title(text: str, limit: int = TITLE_LIMIT) -> str:
    """Trim text to `limit` characters, marking the cut with an ellipsis."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime.

    Naive values are read as UTC. Returns None when the value is missing
    or cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
