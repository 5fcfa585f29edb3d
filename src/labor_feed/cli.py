"""CLI entry point for the labor update feed."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from labor_feed.adapters.feed import JsonFeedWriter
from labor_feed.adapters.sources import build_sources
from labor_feed.config import ConfigError, Settings, get_settings
from labor_feed.core import Item, ItemSource
from labor_feed.use_cases import AggregationService, FeedService


def main(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the feed"),
    config: Path = typer.Option(Path("config.yaml"), "--config", help="YAML config file"),
    sequential: bool = typer.Option(False, "--sequential", help="Pull sources one at a time"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the feed instead of writing it"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Build a single time-ordered feed of NYC and NYS labor regulation updates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = get_settings(config)
    except (ConfigError, OSError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)

    if sequential:
        settings.aggregation.concurrent = False

    try:
        asyncio.run(async_run(settings, output, stdout))
    except Exception as e:
        typer.echo(f"Failed to build feed: {e}", err=True)
        raise typer.Exit(code=1)


def app() -> None:
    """CLI entry point."""
    typer.run(main)


async def async_run(settings: Settings, output: Optional[Path], stdout: bool) -> list[Item]:
    """Async implementation of run command."""
    sources = build_sources(settings)
    run_at = datetime.now(timezone.utc)
    writer = JsonFeedWriter(indent=settings.output.indent)
    aggregator = AggregationService(sources, concurrent=settings.aggregation.concurrent)

    if stdout:
        items = await aggregator.aggregate(run_at)
        print(writer.render(items))
        return items

    output = output or settings.output_path

    print("\n" + "=" * 70)
    print("⚖️  LABOR FEED - NYC / NYS regulatory updates")
    print("=" * 70)
    print(f"\n📡 Sources ({'concurrent' if aggregator.concurrent else 'sequential'}):")
    for source in sources:
        print(f"  {source.emoji} {source.name}")

    items = await FeedService(aggregator, writer).build(output, run_at)

    _print_summary(sources, items)
    print(f"\n✅ Wrote {len(items)} items to {output}\n")
    return items


def _print_summary(sources: list[ItemSource], items: list[Item]) -> None:
    """Show how many items each source contributed after dedup."""
    counts: dict[str, int] = {source.name: 0 for source in sources}
    for item in items:
        counts[item.source] = counts.get(item.source, 0) + 1

    print("\nItems by source:")
    for source in sources:
        count = counts[source.name]
        marker = "" if count else "  (empty or failed)"
        print(f"  {source.emoji} {source.name}: {count}{marker}")


if __name__ == "__main__":
    app()
