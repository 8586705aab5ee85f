"""Tests for streak and dry spell analysis."""

from datetime import date, datetime, timedelta, timezone

from analytics import StreakResult, get_streaks
from events import CountEvent, extract_events

UTC = timezone.utc


def daily_events(item, start: date, days: int) -> list[CountEvent]:
    return [
        CountEvent(item=item, timestamp=datetime(start.year, start.month, start.day, 12, tzinfo=UTC) + timedelta(days=i))
        for i in range(days)
    ]


def test_three_day_streak_scenario(make_item) -> None:
    item = make_item("A", counts=["2024-03-01T10:00Z", "2024-03-02T10:00Z", "2024-03-03T10:00Z"])
    count_events, _ = extract_events([item], 2024, UTC)

    info = get_streaks(count_events, 2024)

    assert info.streak == StreakResult(length=3, start="2024-03-01", end="2024-03-03")
    # Jan 1 - Feb 29 is 60 days; Mar 4 - Dec 31 is 303 days
    assert info.dry_spell == StreakResult(length=303, start="2024-03-04", end="2024-12-31")


def test_no_events_gives_zeros() -> None:
    info = get_streaks([], 2024)
    assert info.streak == StreakResult(0, None, None)
    assert info.dry_spell == StreakResult(0, None, None)


def test_every_day_of_leap_year(make_item) -> None:
    info = get_streaks(daily_events(make_item(), date(2024, 1, 1), 366), 2024)

    assert info.streak == StreakResult(length=366, start="2024-01-01", end="2024-12-31")
    assert info.dry_spell.length == 0


def test_every_day_of_common_year(make_item) -> None:
    info = get_streaks(daily_events(make_item(), date(2023, 1, 1), 365), 2023)
    assert info.streak.length == 365
    assert info.dry_spell.length == 0


def test_streak_running_into_december_31(make_item) -> None:
    item = make_item()
    events = daily_events(item, date(2024, 1, 1), 2) + daily_events(item, date(2024, 12, 29), 3)

    info = get_streaks(events, 2024)

    assert info.streak == StreakResult(length=3, start="2024-12-29", end="2024-12-31")
    assert info.dry_spell == StreakResult(length=361, start="2024-01-03", end="2024-12-28")


def test_dry_spell_opening_the_year(make_item) -> None:
    info = get_streaks(daily_events(make_item(), date(2023, 12, 31), 1), 2023)

    assert info.streak == StreakResult(length=1, start="2023-12-31", end="2023-12-31")
    assert info.dry_spell == StreakResult(length=364, start="2023-01-01", end="2023-12-30")


def test_first_of_equal_streaks_wins(make_item) -> None:
    item = make_item()
    events = daily_events(item, date(2024, 2, 1), 2) + daily_events(item, date(2024, 5, 1), 2)

    info = get_streaks(events, 2024)

    assert info.streak == StreakResult(length=2, start="2024-02-01", end="2024-02-02")


def test_multiple_events_on_one_day_count_once(make_item) -> None:
    item = make_item()
    events = [
        CountEvent(item=item, timestamp=datetime(2024, 7, 4, h, tzinfo=UTC))
        for h in (1, 5, 23)
    ]
    assert get_streaks(events, 2024).streak.length == 1
