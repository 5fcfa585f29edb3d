"""JSON feed writer."""

import json
import os
import tempfile
from pathlib import Path

from labor_feed.core import FeedSink, Item


class JsonFeedWriter(FeedSink):
    """Write the feed as a pretty-printed JSON array."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, items: list[Item]) -> str:
        return json.dumps(
            [item.to_dict() for item in items],
            indent=self.indent,
            ensure_ascii=False,
        )

    def write(self, items: list[Item], path: Path) -> None:
        """Replace the file at `path` with the rendered feed."""
        content = self.render(items)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
