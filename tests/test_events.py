"""Tests for timestamp parsing and event extraction."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from events import available_years, day_key, extract_events, parse_timestamp
from media import STILL

UTC = timezone.utc


def test_parse_timestamp_z_suffix() -> None:
    ts = parse_timestamp("2024-03-01T10:00Z", UTC)
    assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)


def test_parse_timestamp_converts_to_analysis_zone() -> None:
    plus_two = timezone(timedelta(hours=2))
    ts = parse_timestamp("2024-12-31T23:30:00+00:00", plus_two)
    assert ts.year == 2025
    assert ts.hour == 1


def test_parse_timestamp_naive_is_in_analysis_zone() -> None:
    ts = parse_timestamp("2024-06-01T08:15:00", UTC)
    assert ts == datetime(2024, 6, 1, 8, 15, tzinfo=UTC)


def test_parse_timestamp_local_zone_is_aware() -> None:
    assert parse_timestamp("2024-06-01T08:15:00").tzinfo is not None


def test_parse_timestamp_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("not a date", UTC)


def test_parse_timestamp_rejects_non_strings() -> None:
    with pytest.raises(TypeError):
        parse_timestamp(1709287200, UTC)
    with pytest.raises(TypeError):
        parse_timestamp(None, UTC)


def test_day_key() -> None:
    assert day_key(datetime(2024, 3, 1, 23, 59, tzinfo=UTC)) == "2024-03-01"


def test_extract_events_filters_by_year(make_item) -> None:
    item = make_item(
        counts=["2023-12-31T23:59:59Z", "2024-01-01T00:00:00Z", "2024-12-31T23:59:59Z", "2025-01-01T00:00:00Z"],
        plays=["2023-06-01T00:00:00Z", "2024-06-01T00:00:00Z"],
    )

    count_events, play_events = extract_events([item], 2024, UTC)

    assert [e.timestamp for e in count_events] == [
        datetime(2024, 1, 1, 0, 0, tzinfo=UTC),
        datetime(2024, 12, 31, 23, 59, 59, tzinfo=UTC),
    ]
    assert [e.timestamp for e in play_events] == [datetime(2024, 6, 1, tzinfo=UTC)]
    assert all(e.timestamp.year == 2024 for e in count_events + play_events)
    assert all(e.item is item for e in count_events + play_events)


def test_extract_events_year_follows_time_zone(make_item) -> None:
    item = make_item(counts=["2024-12-31T23:30:00Z"])
    plus_two = timezone(timedelta(hours=2))

    assert extract_events([item], 2024, plus_two)[0] == []
    assert len(extract_events([item], 2025, plus_two)[0]) == 1


def test_extract_events_keeps_input_order(make_item) -> None:
    a = make_item("a", counts=["2024-05-02T00:00Z", "2024-05-01T00:00Z"])
    b = make_item("b", counts=["2024-01-01T00:00Z"])

    count_events, _ = extract_events([a, b], 2024, UTC)

    assert [(e.item.id, e.timestamp.day) for e in count_events] == [("a", 2), ("a", 1), ("b", 1)]


def test_extract_events_skips_bad_timestamps(make_item, caplog) -> None:
    item = make_item(counts=["garbage", "2024-02-02T00:00Z"])

    with caplog.at_level(logging.WARNING, logger="events"):
        count_events, _ = extract_events([item], 2024, UTC)

    assert len(count_events) == 1
    assert "garbage" in caplog.text


def test_stills_have_no_play_events(make_item) -> None:
    still = make_item(kind=STILL, counts=["2024-02-02T00:00Z"], plays=["2024-02-02T00:00Z"])

    count_events, play_events = extract_events([still], 2024, UTC)

    assert len(count_events) == 1
    assert play_events == []


def test_items_without_history_contribute_nothing(make_item) -> None:
    assert extract_events([make_item()], 2024, UTC) == ([], [])


def test_available_years(make_item) -> None:
    items = [
        make_item("a", counts=["2022-01-01T00:00Z", "2024-01-01T00:00Z"]),
        make_item("b", plays=["2023-05-05T00:00Z", "2030-01-01T00:00Z", "bad"]),
    ]
    assert available_years(items, UTC, current_year=2024) == [2024, 2023, 2022]


def test_non_string_history_entries_are_skipped(make_item, caplog) -> None:
    item = make_item(counts=[1709287200, None, "2024-02-02T00:00Z"], plays=[{"at": "2024"}])

    with caplog.at_level(logging.WARNING, logger="events"):
        count_events, play_events = extract_events([item], 2024, UTC)
        years = available_years([item], UTC, current_year=2024)

    assert [e.timestamp.day for e in count_events] == [2]
    assert play_events == []
    assert years == [2024]
    assert "1709287200" in caplog.text
