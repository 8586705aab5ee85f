#!/usr/bin/env python3
"""
Event Extraction

Turns media items into flat, year-filtered count and play event lists.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from media import MediaItem

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountEvent:
    """One increment of the tracked activity metric on an item."""
    item: MediaItem
    timestamp: datetime


@dataclass(frozen=True)
class PlayEvent:
    """One playback of a clip."""
    item: MediaItem
    timestamp: datetime


def parse_timestamp(value: str, tz: Optional[tzinfo] = None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime in the analysis zone.

    A trailing 'Z' means UTC. Naive values are taken to already be in the
    analysis zone. With tz=None the analysis zone is the local time zone.

    Raises:
        TypeError: if the value is not a string.
        ValueError: if the value is not a valid ISO-8601 timestamp.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)

    if tz is None:
        # astimezone() treats naive values as local time
        return dt.astimezone()
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def day_key(dt: datetime) -> str:
    """Calendar day of a timestamp as YYYY-MM-DD."""
    return dt.strftime("%Y-%m-%d")


def _timestamps_in_year(
    item: MediaItem,
    history: Iterable[str],
    year: int,
    tz: Optional[tzinfo],
) -> list[datetime]:
    found = []
    for raw in history:
        try:
            ts = parse_timestamp(raw, tz)
        except (TypeError, ValueError) as e:
            log.warning(f"Skipping bad timestamp {raw!r} on item {item.id}: {e}")
            continue
        if ts.year == year:
            found.append(ts)
    return found


def extract_events(
    items: Iterable[MediaItem],
    year: int,
    tz: Optional[tzinfo] = None,
) -> tuple[list[CountEvent], list[PlayEvent]]:
    """Build the count and play events of every item that fall in `year`.

    Events keep the order of the items and of each item's histories.
    Only clips yield play events.

    Args:
        items: Media items to read histories from.
        year: Calendar year (in the analysis zone) to keep.
        tz: Analysis time zone. None means local time.

    Returns:
        (count_events, play_events)
    """
    count_events: list[CountEvent] = []
    play_events: list[PlayEvent] = []

    for item in items:
        for ts in _timestamps_in_year(item, item.count_history, year, tz):
            count_events.append(CountEvent(item=item, timestamp=ts))

        if not item.play_history:
            continue
        if not item.is_clip:
            log.debug(f"Ignoring play history on {item.kind} item {item.id}")
            continue
        for ts in _timestamps_in_year(item, item.play_history, year, tz):
            play_events.append(PlayEvent(item=item, timestamp=ts))

    log.debug(
        f"Extracted {len(count_events)} count events and "
        f"{len(play_events)} play events for {year}"
    )
    return count_events, play_events


def available_years(
    items: Iterable[MediaItem],
    tz: Optional[tzinfo] = None,
    current_year: Optional[int] = None,
) -> list[int]:
    """Return every year with any count or play history, newest first.

    Years after `current_year` (default: this year) are left out.
    """
    if current_year is None:
        current_year = datetime.now(tz).year

    years = set()
    for item in items:
        for raw in (*item.count_history, *item.play_history):
            try:
                years.add(parse_timestamp(raw, tz).year)
            except (TypeError, ValueError) as e:
                log.warning(f"Skipping bad timestamp {raw!r} on item {item.id}: {e}")

    return sorted((y for y in years if y <= current_year), reverse=True)
