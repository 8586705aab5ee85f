#!/usr/bin/env python3
"""Analytics for media-library activity history.

This module computes a year of behavioral statistics from count and play
events:
- Time-based analytics: streaks and dry spells, play sessions, peak day
- Rankings: people, tags (with month breakdown), play tags, media items
- Library analytics: new items, activity distribution, efficiency, timeline
- All-time aggregates: counts by tag, release year, person and studio,
  count vs. play correlations, top items

Every calculation is a pure function returning an immutable result;
compute_year_statistics() runs extraction once and merges the results,
compute_library_statistics() does the same for the all-time aggregates.
"""

import logging
from bisect import bisect_right
from collections import Counter, defaultdict
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Iterable, Mapping, Optional, Sequence

import numpy as np

from events import CountEvent, PlayEvent, day_key, extract_events, parse_timestamp
from media import CLIP, MEDIA_KINDS, STILL, ItemKey, MediaItem, Person

log = logging.getLogger(__name__)

# Configuration
SESSION_WINDOW = timedelta(hours=1)  # Max time from a play to its count event
TOP_PEOPLE_LIMIT = 5
TOP_TAGS_LIMIT = 8
TOP_MEDIA_LIMIT = 5
SESSION_LIMIT = 5  # Shortest/longest sessions to keep
TOP3_LIMIT = 3
LIBRARY_LIMIT = 15  # Entries per all-time chart
UNKNOWN_YEAR = "Unknown"

HOURLY_LABELS = tuple(f"{h}:00" for h in range(24))
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

PersonImageResolver = Callable[[list[str]], Mapping[str, str]]


@dataclass(frozen=True)
class StreakResult:
    """A run of consecutive days. Dates are None when length is 0."""
    length: int = 0
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class StreakInfo:
    streak: StreakResult
    dry_spell: StreakResult


@dataclass(frozen=True)
class Session:
    """A play event paired with its latest count event inside the window."""
    item: MediaItem
    start: datetime
    duration_seconds: float


@dataclass(frozen=True)
class SessionSummary:
    sessions: tuple[Session, ...]
    shortest: tuple[Session, ...]
    longest: tuple[Session, ...]


@dataclass(frozen=True)
class RankedEntry:
    """Aggregate count for one entity (person, tag or item)."""
    key: str
    name: str
    count: int
    by_month: Optional[tuple[int, ...]] = None
    image_path: Optional[str] = None


@dataclass(frozen=True)
class MediaTotals:
    item: MediaItem
    count_total: int
    play_total: int


@dataclass(frozen=True)
class ActivitySplit:
    kind: str
    with_activity: int
    without_activity: int
    total: int


@dataclass(frozen=True)
class PeakDay:
    date: Optional[str]
    count: int
    events: tuple[CountEvent, ...]
    hourly: tuple[int, ...]


@dataclass(frozen=True)
class GeneralStats:
    new_clips: int
    new_stills: int
    newest_clip_thumbnail: Optional[str]
    newest_still_thumbnail: Optional[str]
    total_count_events: int
    total_play_events: int
    top_item: Optional[RankedEntry]


@dataclass(frozen=True)
class ClipEfficiency:
    item: MediaItem
    count_total: int
    play_total: int
    ratio: float


@dataclass(frozen=True)
class EfficiencyStats:
    most_efficient: tuple[ClipEfficiency, ...]
    least_efficient: tuple[ClipEfficiency, ...]


@dataclass(frozen=True)
class Timeline:
    months: tuple[tuple[CountEvent, ...], ...]
    monthly_totals: tuple[int, ...]


@dataclass(frozen=True)
class YearStatistics:
    """Every statistic computed for one year."""
    year: int
    general: GeneralStats
    streaks: StreakInfo
    sessions: SessionSummary
    top_people: tuple[RankedEntry, ...]
    top_tags: tuple[RankedEntry, ...]
    top3_tags: tuple[RankedEntry, ...]
    top_play_tags: tuple[RankedEntry, ...]
    top_media: tuple[MediaTotals, ...]
    top_item: Optional[RankedEntry]
    distribution: tuple[ActivitySplit, ...]
    peak_day: PeakDay
    efficiency: EfficiencyStats
    timeline: Timeline


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: int
    title: str


@dataclass(frozen=True)
class Correlation:
    """Scatter points with their Pearson coefficient (None if undefined)."""
    points: tuple[ScatterPoint, ...]
    coefficient: Optional[float]


@dataclass(frozen=True)
class LibraryStatistics:
    """All-time aggregates over items with a count above zero."""
    tag_occurrences: tuple[RankedEntry, ...]
    by_release_year: tuple[tuple[str, int], ...]
    by_person: tuple[RankedEntry, ...]
    by_studio: tuple[RankedEntry, ...]
    count_vs_plays: Correlation
    count_vs_play_duration: Correlation
    top_items: tuple[RankedEntry, ...]
    distribution: tuple[ActivitySplit, ...]


# =============================================================================
# Time-based Analytics
# =============================================================================


def _closed_run(length: int, end: date) -> StreakResult:
    start = end - timedelta(days=length - 1)
    return StreakResult(length=length, start=start.isoformat(), end=end.isoformat())


def get_streaks(count_events: Iterable[CountEvent], year: int) -> StreakInfo:
    """Find the longest runs of active and inactive days in a year.

    A streak is a run of consecutive calendar days each holding at least one
    count event; a dry spell is a run of days holding none. Runs that reach
    December 31st are closed at the year's end.

    Args:
        count_events: Count events of the year.
        year: The calendar year to walk, January 1st to December 31st.

    Returns:
        StreakInfo with the longest streak and longest dry spell. Both are
        zero-length when there are no count events.
    """
    active_days = {day_key(event.timestamp) for event in count_events}

    if not active_days:
        return StreakInfo(streak=StreakResult(), dry_spell=StreakResult())

    best_streak = StreakResult()
    best_gap = StreakResult()
    current_streak = 0
    current_gap = 0

    first_day = date(year, 1, 1)
    last_day = date(year, 12, 31)
    one_day = timedelta(days=1)

    day = first_day
    while day <= last_day:
        if day.isoformat() in active_days:
            current_streak += 1
            if current_gap > best_gap.length:
                best_gap = _closed_run(current_gap, day - one_day)
            current_gap = 0
        else:
            current_gap += 1
            if current_streak > best_streak.length:
                best_streak = _closed_run(current_streak, day - one_day)
            current_streak = 0
        day += one_day

    # Whichever run is still open ends on December 31st
    if current_streak > best_streak.length:
        best_streak = _closed_run(current_streak, last_day)
    if current_gap > best_gap.length:
        best_gap = _closed_run(current_gap, last_day)

    return StreakInfo(streak=best_streak, dry_spell=best_gap)


def get_sessions(
    count_events: Iterable[CountEvent],
    play_events: Iterable[PlayEvent],
    window: timedelta = SESSION_WINDOW,
) -> list[Session]:
    """Pair each play event with a later count event on the same item.

    For a play at time p, the paired count event is the latest one in
    [p, p + window]. Pairs with a duration of zero are dropped.

    Args:
        count_events: Count events of the year.
        play_events: Play events of the year.
        window: Longest allowed time between a play and its count event.

    Returns:
        All sessions sorted by ascending duration.
    """
    count_times: dict[ItemKey, list[datetime]] = defaultdict(list)
    for event in count_events:
        count_times[event.item.key].append(event.timestamp)

    plays_by_item: dict[ItemKey, list[PlayEvent]] = defaultdict(list)
    for event in play_events:
        plays_by_item[event.item.key].append(event)

    sessions = []
    for key, plays in plays_by_item.items():
        times = sorted(count_times.get(key, []))
        if not times:
            continue

        for play in plays:
            idx = bisect_right(times, play.timestamp + window) - 1
            if idx < 0 or times[idx] < play.timestamp:
                continue
            duration = (times[idx] - play.timestamp).total_seconds()
            if duration <= 0:
                continue
            sessions.append(Session(
                item=play.item,
                start=play.timestamp,
                duration_seconds=duration,
            ))

    sessions.sort(key=lambda s: s.duration_seconds)
    return sessions


def summarize_sessions(sessions: Sequence[Session], limit: int = SESSION_LIMIT) -> SessionSummary:
    """Pick the `limit` shortest and longest sessions (longest first)."""
    if limit <= 0:
        return SessionSummary(sessions=tuple(sessions), shortest=(), longest=())
    return SessionSummary(
        sessions=tuple(sessions),
        shortest=tuple(sessions[:limit]),
        longest=tuple(reversed(sessions[-limit:])),
    )


def get_peak_day(count_events: Sequence[CountEvent]) -> PeakDay:
    """Find the day with the most count events and its hourly breakdown.

    Ties go to the earliest date. The hourly breakdown counts that day's
    events per hour of day (0-23).
    """
    if not count_events:
        return PeakDay(date=None, count=0, events=(), hourly=(0,) * 24)

    by_day: dict[str, int] = defaultdict(int)
    for event in count_events:
        by_day[day_key(event.timestamp)] += 1

    # max() keeps the first maximum, so walk days in date order
    peak_date = max(sorted(by_day), key=by_day.get)
    peak_events = tuple(e for e in count_events if day_key(e.timestamp) == peak_date)

    hours = np.array([e.timestamp.hour for e in peak_events], dtype=np.int64)
    hourly = np.bincount(hours, minlength=24)

    return PeakDay(
        date=peak_date,
        count=by_day[peak_date],
        events=peak_events,
        hourly=tuple(int(n) for n in hourly),
    )


# =============================================================================
# Rankings
# =============================================================================


def top_n(entries: Sequence, n: int) -> list:
    """Slice an already ranked list down to its first n entries."""
    return list(entries[:max(n, 0)])


def _rank(entries: Iterable[RankedEntry], limit: Optional[int]) -> list[RankedEntry]:
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(entries, key=lambda e: e.count, reverse=True)
    return ranked if limit is None else top_n(ranked, limit)


def rank_people(
    count_events: Iterable[CountEvent],
    limit: Optional[int] = TOP_PEOPLE_LIMIT,
) -> list[RankedEntry]:
    """Count events per associated person, most frequent first."""
    names: dict[str, str] = {}
    images: dict[str, Optional[str]] = {}
    counts: dict[str, int] = defaultdict(int)

    for event in count_events:
        for person in event.item.people:
            names.setdefault(person.id, person.name)
            if not images.get(person.id):
                images[person.id] = person.image_path
            counts[person.id] += 1

    return _rank(
        (
            RankedEntry(key=pid, name=names[pid], count=count, image_path=images.get(pid))
            for pid, count in counts.items()
        ),
        limit,
    )


def attach_person_images(
    entries: Sequence[RankedEntry],
    resolve_images: Optional[PersonImageResolver],
) -> list[RankedEntry]:
    """Fill in person images with one batch call for all ranked people.

    Errors raised by the resolver propagate to the caller.
    """
    if resolve_images is None or not entries:
        return list(entries)

    images = resolve_images([e.key for e in entries]) or {}
    return [replace(e, image_path=images.get(e.key) or e.image_path) for e in entries]


def rank_tags(
    events: Iterable,
    limit: Optional[int] = TOP_TAGS_LIMIT,
) -> list[RankedEntry]:
    """Count events per tag with a 12-month breakdown, most frequent first.

    Works for both count events and play events.

    Args:
        events: CountEvent or PlayEvent objects.
        limit: Number of tags to keep. None keeps all.

    Returns:
        List of RankedEntry whose by_month holds 12 counts, January first.
    """
    names: dict[str, str] = {}
    by_month: dict[str, np.ndarray] = {}

    for event in events:
        month = event.timestamp.month - 1
        for tag in event.item.tags:
            if tag.id not in by_month:
                names[tag.id] = tag.name
                by_month[tag.id] = np.zeros(12, dtype=np.int64)
            by_month[tag.id][month] += 1

    return _rank(
        (
            RankedEntry(
                key=tag_id,
                name=names[tag_id],
                count=int(months.sum()),
                by_month=tuple(int(n) for n in months),
            )
            for tag_id, months in by_month.items()
        ),
        limit,
    )


def rank_media(
    count_events: Iterable[CountEvent],
    play_events: Iterable[PlayEvent],
    limit: Optional[int] = TOP_MEDIA_LIMIT,
) -> list[MediaTotals]:
    """Rank items by count events, carrying their play event totals.

    Only items with at least one count event are ranked.
    """
    items: dict[ItemKey, MediaItem] = {}
    count_totals: dict[ItemKey, int] = defaultdict(int)
    for event in count_events:
        items.setdefault(event.item.key, event.item)
        count_totals[event.item.key] += 1

    play_totals: dict[ItemKey, int] = defaultdict(int)
    for event in play_events:
        if event.item.key in items:
            play_totals[event.item.key] += 1

    ranked = sorted(
        (
            MediaTotals(item=items[key], count_total=count, play_total=play_totals[key])
            for key, count in count_totals.items()
        ),
        key=lambda m: m.count_total,
        reverse=True,
    )
    return ranked if limit is None else top_n(ranked, limit)


def get_top_item(count_events: Iterable[CountEvent]) -> Optional[RankedEntry]:
    """Return the item with the most count events (first seen wins ties)."""
    items: dict[ItemKey, MediaItem] = {}
    counts: Counter = Counter()
    for event in count_events:
        items.setdefault(event.item.key, event.item)
        counts[event.item.key] += 1

    if not counts:
        return None

    key, count = counts.most_common(1)[0]
    item = items[key]
    return RankedEntry(key=item.id, name=item.title, count=count, image_path=item.thumbnail)


def get_distribution(
    items: Iterable[MediaItem],
    count_events: Iterable[CountEvent],
    totals: Optional[Mapping[str, int]] = None,
) -> tuple[ActivitySplit, ...]:
    """Split each media kind into items with and without count events.

    Args:
        items: The items handed to the computation.
        count_events: Count events of the year.
        totals: Unfiltered number of items per kind, keyed by CLIP/STILL.
            A kind missing here falls back to the number of such items
            in `items`.

    Returns:
        One ActivitySplit per kind, clips first.
    """
    active = {event.item.key for event in count_events}
    return _split_by_kind(items, active, totals)


def _split_by_kind(
    items: Iterable[MediaItem],
    active: set[ItemKey],
    totals: Optional[Mapping[str, int]],
) -> tuple[ActivitySplit, ...]:
    keys_by_kind: dict[str, set[ItemKey]] = {kind: set() for kind in MEDIA_KINDS}
    for item in items:
        if item.kind in keys_by_kind:
            keys_by_kind[item.kind].add(item.key)

    splits = []
    for kind in MEDIA_KINDS:
        with_activity = len(keys_by_kind[kind] & active)
        total = (totals or {}).get(kind)
        if total is None:
            total = len(keys_by_kind[kind])
        splits.append(ActivitySplit(
            kind=kind,
            with_activity=with_activity,
            without_activity=max(total - with_activity, 0),
            total=total,
        ))
    return tuple(splits)


# =============================================================================
# All-time Aggregates
# =============================================================================


def _counted(items: Iterable[MediaItem]) -> list[MediaItem]:
    return [item for item in items if item.total_count > 0]


def get_library_distribution(
    items: Iterable[MediaItem],
    totals: Optional[Mapping[str, int]] = None,
) -> tuple[ActivitySplit, ...]:
    """Split each media kind into items with and without an all-time count."""
    items = list(items)
    return _split_by_kind(items, {item.key for item in _counted(items)}, totals)


def get_tag_occurrences(
    items: Iterable[MediaItem],
    limit: Optional[int] = LIBRARY_LIMIT,
) -> list[RankedEntry]:
    """Number of counted items carrying each tag, most frequent first."""
    names: dict[str, str] = {}
    counts: dict[str, int] = defaultdict(int)
    for item in _counted(items):
        for tag in item.tags:
            names.setdefault(tag.id, tag.name)
            counts[tag.id] += 1

    return _rank(
        (RankedEntry(key=tag_id, name=names[tag_id], count=count) for tag_id, count in counts.items()),
        limit,
    )


def release_year(item: MediaItem) -> str:
    """Year of the item's release date, or UNKNOWN_YEAR."""
    if not item.date:
        return UNKNOWN_YEAR

    text = item.date.strip()
    if len(text) == 4 and text.isdigit():
        return text
    try:
        return str(date.fromisoformat(text[:10]).year)
    except ValueError as e:
        log.warning(f"Skipping bad release date {item.date!r} on item {item.id}: {e}")
        return UNKNOWN_YEAR


def get_counts_by_release_year(items: Iterable[MediaItem]) -> list[tuple[str, int]]:
    """Sum all-time counts per release year, oldest first, UNKNOWN_YEAR last."""
    totals: dict[str, int] = defaultdict(int)
    for item in _counted(items):
        totals[release_year(item)] += item.total_count

    def order(pair: tuple[str, int]) -> tuple[bool, int]:
        label = pair[0]
        return (label == UNKNOWN_YEAR, 0 if label == UNKNOWN_YEAR else int(label))

    return sorted(totals.items(), key=order)


def get_counts_by_person(
    items: Iterable[MediaItem],
    limit: Optional[int] = LIBRARY_LIMIT,
) -> list[RankedEntry]:
    """Sum all-time counts of each person's items, most counted first."""
    people: dict[str, Person] = {}
    counts: dict[str, int] = defaultdict(int)
    for item in _counted(items):
        for person in item.people:
            people.setdefault(person.id, person)
            counts[person.id] += item.total_count

    return _rank(
        (
            RankedEntry(key=pid, name=people[pid].name, count=count, image_path=people[pid].image_path)
            for pid, count in counts.items()
        ),
        limit,
    )


def get_counts_by_studio(
    items: Iterable[MediaItem],
    limit: Optional[int] = LIBRARY_LIMIT,
) -> list[RankedEntry]:
    """Sum all-time counts per studio, most counted first."""
    counts: dict[str, int] = defaultdict(int)
    for item in _counted(items):
        if item.studio:
            counts[item.studio] += item.total_count

    return _rank((RankedEntry(key=name, name=name, count=count) for name, count in counts.items()), limit)


def get_top_count_items(
    items: Iterable[MediaItem],
    limit: Optional[int] = LIBRARY_LIMIT,
) -> list[RankedEntry]:
    return _rank(
        (
            RankedEntry(key=item.id, name=item.title, count=item.total_count, image_path=item.thumbnail)
            for item in _counted(items)
        ),
        limit,
    )


def _correlate(points: list[ScatterPoint]) -> Correlation:
    coefficient = None
    if len(points) >= 2:
        x = np.array([p.x for p in points], dtype=np.float64)
        y = np.array([p.y for p in points], dtype=np.float64)
        # corrcoef is undefined when either axis is constant
        if np.std(x) > 0 and np.std(y) > 0:
            coefficient = float(np.corrcoef(x, y)[0, 1])
    return Correlation(points=tuple(points), coefficient=coefficient)


def get_count_vs_plays(items: Iterable[MediaItem]) -> Correlation:
    """Plot each counted item's play count (x) against its count (y).

    Items without a known play count (stills) are left out.
    """
    return _correlate([
        ScatterPoint(x=item.play_count, y=item.total_count, title=item.title)
        for item in _counted(items)
        if item.play_count is not None
    ])


def get_count_vs_play_duration(items: Iterable[MediaItem]) -> Correlation:
    """Plot each counted item's play duration in seconds (x) against its count (y)."""
    return _correlate([
        ScatterPoint(x=item.play_duration, y=item.total_count, title=item.title)
        for item in _counted(items)
        if item.play_duration is not None
    ])


# =============================================================================
# Library Analytics
# =============================================================================


def get_general_stats(
    items: Iterable[MediaItem],
    count_events: Sequence[CountEvent],
    play_events: Sequence[PlayEvent],
    year: int,
    tz: Optional[tzinfo] = None,
) -> GeneralStats:
    """Headline numbers: new items per kind, event totals and the top item."""
    new_items: dict[str, list[tuple[datetime, MediaItem]]] = {kind: [] for kind in MEDIA_KINDS}

    for item in items:
        if not item.created_at or item.kind not in new_items:
            continue
        try:
            created = parse_timestamp(item.created_at, tz)
        except (TypeError, ValueError) as e:
            log.warning(f"Skipping bad created_at {item.created_at!r} on item {item.id}: {e}")
            continue
        if created.year == year:
            new_items[item.kind].append((created, item))

    def newest_thumbnail(kind: str) -> Optional[str]:
        if not new_items[kind]:
            return None
        _, newest = max(new_items[kind], key=lambda pair: pair[0])
        return newest.thumbnail

    return GeneralStats(
        new_clips=len(new_items[CLIP]),
        new_stills=len(new_items[STILL]),
        newest_clip_thumbnail=newest_thumbnail(CLIP),
        newest_still_thumbnail=newest_thumbnail(STILL),
        total_count_events=len(count_events),
        total_play_events=len(play_events),
        top_item=get_top_item(count_events),
    )


def get_efficiency(
    count_events: Iterable[CountEvent],
    play_events: Iterable[PlayEvent],
    limit: int = TOP3_LIMIT,
) -> EfficiencyStats:
    """Rank played clips by count events per play event.

    Only clips with at least one play event take part. Most efficient is
    ordered by ratio descending, least efficient by ratio ascending.
    """
    items: dict[ItemKey, MediaItem] = {}
    plays: dict[ItemKey, int] = defaultdict(int)
    for event in play_events:
        if not event.item.is_clip:
            continue
        items.setdefault(event.item.key, event.item)
        plays[event.item.key] += 1

    counts: dict[ItemKey, int] = defaultdict(int)
    for event in count_events:
        if event.item.key in plays:
            counts[event.item.key] += 1

    entries = [
        ClipEfficiency(
            item=items[key],
            count_total=counts[key],
            play_total=play_total,
            ratio=counts[key] / play_total,
        )
        for key, play_total in plays.items()
    ]

    most = sorted(entries, key=lambda e: e.ratio, reverse=True)
    least = sorted(entries, key=lambda e: e.ratio)
    return EfficiencyStats(
        most_efficient=tuple(top_n(most, limit)),
        least_efficient=tuple(top_n(least, limit)),
    )


def get_timeline(count_events: Iterable[CountEvent]) -> Timeline:
    """Bucket count events into months, keeping their input order."""
    months: list[list[CountEvent]] = [[] for _ in range(12)]
    for event in count_events:
        months[event.timestamp.month - 1].append(event)

    return Timeline(
        months=tuple(tuple(m) for m in months),
        monthly_totals=tuple(len(m) for m in months),
    )


# =============================================================================
# Year in Review
# =============================================================================


def compute_year_statistics(
    year: int,
    items: Sequence[MediaItem],
    totals: Optional[Mapping[str, int]] = None,
    *,
    tz: Optional[tzinfo] = None,
    resolve_person_images: Optional[PersonImageResolver] = None,
    window: timedelta = SESSION_WINDOW,
    people_limit: int = TOP_PEOPLE_LIMIT,
    tag_limit: int = TOP_TAGS_LIMIT,
    media_limit: int = TOP_MEDIA_LIMIT,
    session_limit: int = SESSION_LIMIT,
) -> YearStatistics:
    """
    Compute every statistic for one year.

    Args:
        year: The year to review.
        items: Items with activity, as returned by the data source.
        totals: Unfiltered number of items per kind (CLIP/STILL), used for
            the activity distribution.
        tz: Analysis time zone. None means local time.
        resolve_person_images: Optional callable mapping a list of person
            ids to image paths. Called once with the top people.
        window: Longest time between a play and its paired count event.
        people_limit, tag_limit, media_limit, session_limit: Ranking sizes.

    Returns a YearStatistics. A year without events yields zero/empty
    sections, never an error.
    """
    count_events, play_events = extract_events(items, year, tz)

    top_people = attach_person_images(
        rank_people(count_events, people_limit),
        resolve_person_images,
    )
    top_tags = rank_tags(count_events, tag_limit)
    general = get_general_stats(items, count_events, play_events, year, tz)

    stats = YearStatistics(
        year=year,
        general=general,
        streaks=get_streaks(count_events, year),
        sessions=summarize_sessions(get_sessions(count_events, play_events, window), session_limit),
        top_people=tuple(top_people),
        top_tags=tuple(top_tags),
        top3_tags=tuple(top_n(top_tags, TOP3_LIMIT)),
        top_play_tags=tuple(rank_tags(play_events, tag_limit)),
        top_media=tuple(rank_media(count_events, play_events, media_limit)),
        top_item=general.top_item,
        distribution=get_distribution(items, count_events, totals),
        peak_day=get_peak_day(count_events),
        efficiency=get_efficiency(count_events, play_events),
        timeline=get_timeline(count_events),
    )

    log.info(
        f"Computed {year} statistics: {len(count_events)} count events, "
        f"{len(play_events)} play events, {len(stats.sessions.sessions)} sessions"
    )
    return stats


def compute_library_statistics(
    items: Sequence[MediaItem],
    totals: Optional[Mapping[str, int]] = None,
    *,
    resolve_person_images: Optional[PersonImageResolver] = None,
    limit: int = LIBRARY_LIMIT,
) -> LibraryStatistics:
    """
    Compute the all-time aggregates over the whole library.

    Uses each item's all-time count (its counter, or the length of its
    count history), not the events of a single year. Items whose count is
    zero are left out of every aggregate except the distribution totals.
    resolve_person_images, if given, is called once with the ranked people.
    """
    stats = LibraryStatistics(
        tag_occurrences=tuple(get_tag_occurrences(items, limit)),
        by_release_year=tuple(get_counts_by_release_year(items)),
        by_person=tuple(attach_person_images(get_counts_by_person(items, limit), resolve_person_images)),
        by_studio=tuple(get_counts_by_studio(items, limit)),
        count_vs_plays=get_count_vs_plays(items),
        count_vs_play_duration=get_count_vs_play_duration(items),
        top_items=tuple(get_top_count_items(items, limit)),
        distribution=get_library_distribution(items, totals),
    )

    log.info(f"Computed library statistics for {len(_counted(items))} counted items")
    return stats
