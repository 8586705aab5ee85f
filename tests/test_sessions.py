"""Tests for pairing play events with count events."""

from datetime import timedelta, timezone

from analytics import SESSION_WINDOW, get_sessions, summarize_sessions
from events import extract_events
from media import CLIP, STILL

UTC = timezone.utc


def test_pairs_with_latest_count_in_window(make_item) -> None:
    item = make_item(
        plays=["2024-01-01T20:00Z"],
        counts=["2024-01-01T20:04Z", "2024-01-01T20:30Z"],
    )
    count_events, play_events = extract_events([item], 2024, UTC)

    sessions = get_sessions(count_events, play_events)

    assert len(sessions) == 1
    assert sessions[0].duration_seconds == 1800
    assert sessions[0].item is item
    assert sessions[0].start.hour == 20


def test_window_edge_is_inclusive(make_item) -> None:
    item = make_item(plays=["2024-01-01T20:00Z"], counts=["2024-01-01T21:00Z"])
    sessions = get_sessions(*extract_events([item], 2024, UTC))
    assert [s.duration_seconds for s in sessions] == [3600]


def test_count_outside_window_is_not_paired(make_item) -> None:
    item = make_item(
        plays=["2024-01-01T20:00Z"],
        counts=["2024-01-01T21:00:01Z", "2024-01-01T19:59:00Z"],
    )
    assert get_sessions(*extract_events([item], 2024, UTC)) == []


def test_zero_duration_is_dropped(make_item) -> None:
    item = make_item(plays=["2024-01-01T20:00Z"], counts=["2024-01-01T20:00Z"])
    assert get_sessions(*extract_events([item], 2024, UTC)) == []


def test_counts_on_other_items_are_ignored(make_item) -> None:
    played = make_item("p", plays=["2024-01-01T20:00Z"])
    other = make_item("o", counts=["2024-01-01T20:10Z"])
    assert get_sessions(*extract_events([played, other], 2024, UTC)) == []


def test_counts_on_a_still_with_the_same_id_are_ignored(make_item) -> None:
    clip = make_item("1", kind=CLIP, plays=["2024-01-01T20:00Z"])
    still = make_item("1", kind=STILL, counts=["2024-01-01T20:30Z"])
    assert get_sessions(*extract_events([clip, still], 2024, UTC)) == []


def test_custom_window(make_item) -> None:
    item = make_item(plays=["2024-01-01T20:00Z"], counts=["2024-01-01T20:10Z", "2024-01-01T20:40Z"])
    count_events, play_events = extract_events([item], 2024, UTC)

    sessions = get_sessions(count_events, play_events, window=timedelta(minutes=15))

    assert [s.duration_seconds for s in sessions] == [600]


def test_sessions_sorted_and_bounded(make_item) -> None:
    item = make_item(
        plays=["2024-01-01T10:00Z", "2024-02-01T10:00Z", "2024-03-01T10:00Z"],
        counts=["2024-01-01T10:45Z", "2024-02-01T10:05Z", "2024-03-01T10:20Z"],
    )

    sessions = get_sessions(*extract_events([item], 2024, UTC))

    durations = [s.duration_seconds for s in sessions]
    assert durations == [300, 1200, 2700]
    assert all(0 < d <= SESSION_WINDOW.total_seconds() for d in durations)


def test_summarize_sessions(make_item) -> None:
    plays = [f"2024-01-{d:02d}T10:00Z" for d in range(1, 8)]
    counts = [f"2024-01-{d:02d}T10:{d:02d}Z" for d in range(1, 8)]
    sessions = get_sessions(*extract_events([make_item(plays=plays, counts=counts)], 2024, UTC))

    summary = summarize_sessions(sessions, limit=2)

    assert len(summary.sessions) == 7
    assert [s.duration_seconds for s in summary.shortest] == [60, 120]
    assert [s.duration_seconds for s in summary.longest] == [420, 360]


def test_summarize_sessions_with_few_sessions(make_item) -> None:
    item = make_item(plays=["2024-01-01T10:00Z"], counts=["2024-01-01T10:01Z"])
    summary = summarize_sessions(get_sessions(*extract_events([item], 2024, UTC)), limit=5)

    assert len(summary.shortest) == 1
    assert len(summary.longest) == 1
    assert summarize_sessions([], limit=0).longest == ()
