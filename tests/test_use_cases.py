"""Tests for use cases."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from labor_feed.adapters.http_client import FetchError, FetchErrorKind
from labor_feed.core import Item, ItemSource
from labor_feed.use_cases import AggregationService, FeedService, dedupe, sort_by_recency

RUN_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_item(source: str, title: str, date: str, item_id: str | None = None) -> Item:
    return Item(
        id=item_id or f"{source}-{title}-{date}",
        source=source,
        title=title,
        date=date,
        url="https://example.com",
    )


class StubSource(ItemSource):
    """Source returning canned items, optionally after a delay or with an error."""

    def __init__(self, name: str, items=None, error: Exception | None = None, delay: float = 0) -> None:
        self.name = name
        self.items = items or []
        self.error = error
        self.delay = delay
        self.calls: list[datetime] = []

    async def fetch_items(self, run_at: datetime) -> list[Item]:
        self.calls.append(run_at)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.items)


def test_dedupe_first_occurrence_wins() -> None:
    first = make_item("S1", "Wage bill update", "2024-01-01T00:00:00Z", "a")
    second = make_item("S1", "Wage bill update", "2024-06-01T00:00:00Z", "b")
    other_source = make_item("S2", "Wage bill update", "2024-01-01T00:00:00Z", "c")

    result = dedupe([first, second, other_source])

    assert [item.id for item in result] == ["a", "c"]


def test_dedupe_is_idempotent() -> None:
    items = [
        make_item("S1", "A", "2024-01-01T00:00:00Z"),
        make_item("S1", "A", "2024-01-02T00:00:00Z"),
        make_item("S2", "B", "2024-01-03T00:00:00Z"),
        make_item("S1", "C", "2024-01-04T00:00:00Z"),
    ]

    once = dedupe(items)

    assert dedupe(once) == once
    assert dedupe([]) == []


def test_sort_by_recency() -> None:
    items = [
        make_item("S", "old", "2024-01-01T00:00:00Z"),
        make_item("S", "new", "2024-01-03T00:00:00.000Z"),
        make_item("S", "middle", "2024-01-02T00:00:00+00:00"),
    ]

    result = sort_by_recency(items)

    assert [item.title for item in result] == ["new", "middle", "old"]


def test_sort_compares_instants_across_offsets() -> None:
    items = [
        make_item("S", "utc", "2024-01-01T12:00:00Z"),
        make_item("S", "eastern", "2024-01-01T08:00:00-05:00"),  # 13:00 UTC
    ]

    assert [item.title for item in sort_by_recency(items)] == ["eastern", "utc"]


def test_sort_is_stable_for_ties_and_unparsable_dates() -> None:
    items = [
        make_item("S", "bad-1", "yesterday"),
        make_item("S", "tie-1", "2024-01-01T00:00:00Z"),
        make_item("S", "newest", "2024-02-01T00:00:00Z"),
        make_item("S", "bad-2", "???"),
        make_item("S", "tie-2", "2024-01-01T00:00:00.000Z"),
    ]

    result = sort_by_recency(items)

    assert [item.title for item in result] == ["newest", "tie-1", "tie-2", "bad-1", "bad-2"]


@pytest.mark.asyncio
async def test_aggregate_example_feed() -> None:
    """Duplicates from later sources are dropped, output is newest first."""
    a = StubSource("A", [make_item("S1", "Wage bill update", "2024-01-02T00:00:00Z")])
    b = StubSource("B", [make_item("S1", "Wage bill update", "2024-01-01T00:00:00Z")])
    c = StubSource("C", [make_item("S2", "New rule", "2024-01-03T00:00:00Z")])

    result = await AggregationService([a, b, c]).aggregate(RUN_AT)

    assert [(item.source, item.title, item.date) for item in result] == [
        ("S2", "New rule", "2024-01-03T00:00:00Z"),
        ("S1", "Wage bill update", "2024-01-02T00:00:00Z"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_aggregate_uses_source_order_not_completion_order(concurrent: bool) -> None:
    slow = StubSource("slow", [make_item("S", "Same", "2024-01-01T00:00:00Z", "slow")], delay=0.05)
    fast = StubSource("fast", [make_item("S", "Same", "2024-05-01T00:00:00Z", "fast")])

    result = await AggregationService([slow, fast], concurrent=concurrent).aggregate(RUN_AT)

    assert [item.id for item in result] == ["slow"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        FetchError(FetchErrorKind.TIMEOUT, "https://example.com"),
        FetchError(FetchErrorKind.HTTP_STATUS, "https://example.com", status=500),
        FetchError(FetchErrorKind.PARSE_ERROR, "https://example.com"),
        KeyError("MatterTitle"),
    ],
)
async def test_aggregate_isolates_failing_source(error: Exception, caplog) -> None:
    good_before = StubSource("before", [make_item("S1", "One", "2024-01-01T00:00:00Z")])
    broken = StubSource("broken", error=error)
    good_after = StubSource("after", [make_item("S2", "Two", "2024-01-02T00:00:00Z")])

    result = await AggregationService([good_before, broken, good_after]).aggregate(RUN_AT)

    assert [item.title for item in result] == ["Two", "One"]
    assert "broken" in caplog.text


@pytest.mark.asyncio
async def test_aggregate_all_sources_empty() -> None:
    sources = [StubSource("a", error=RuntimeError("down")), StubSource("b")]

    assert await AggregationService(sources).aggregate(RUN_AT) == []


@pytest.mark.asyncio
async def test_aggregate_shares_run_timestamp() -> None:
    sources = [StubSource("a"), StubSource("b"), StubSource("c")]

    await AggregationService(sources).aggregate(RUN_AT)

    assert [source.calls for source in sources] == [[RUN_AT], [RUN_AT], [RUN_AT]]


@pytest.mark.asyncio
async def test_aggregate_defaults_run_timestamp_to_now() -> None:
    source = StubSource("a")

    await AggregationService([source]).aggregate()

    assert len(source.calls) == 1
    assert source.calls[0].tzinfo is not None


@pytest.mark.asyncio
async def test_aggregate_with_mock_sources() -> None:
    """Any object with an async pull() can be aggregated."""
    mock_source = AsyncMock()
    mock_source.pull.return_value = [make_item("S", "Mocked", "2024-01-01T00:00:00Z")]

    result = await AggregationService([mock_source]).aggregate(RUN_AT)

    assert [item.title for item in result] == ["Mocked"]
    mock_source.pull.assert_called_once_with(RUN_AT)


@pytest.mark.asyncio
async def test_feed_service_writes_complete_feed() -> None:
    items = [make_item("S", "One", "2024-01-01T00:00:00Z")]
    aggregator = AsyncMock()
    aggregator.aggregate.return_value = items
    sink = Mock()

    result = await FeedService(aggregator, sink).build(Path("updates.json"), RUN_AT)

    assert result == items
    aggregator.aggregate.assert_called_once_with(RUN_AT)
    sink.write.assert_called_once_with(items, Path("updates.json"))


@pytest.mark.asyncio
async def test_feed_service_does_not_write_on_failure() -> None:
    aggregator = AsyncMock()
    aggregator.aggregate.side_effect = RuntimeError("orchestration bug")
    sink = Mock()

    with pytest.raises(RuntimeError, match="orchestration bug"):
        await FeedService(aggregator, sink).build(Path("updates.json"), RUN_AT)

    sink.write.assert_not_called()
