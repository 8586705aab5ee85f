#!/usr/bin/env python3
"""
Unwind Stats CLI

Display a year in review from a media-library snapshot.
"""

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from analytics import (
    HOURLY_LABELS,
    MONTH_NAMES,
    LibraryStatistics,
    YearStatistics,
    compute_library_statistics,
    compute_year_statistics,
)
from events import available_years
from media import MediaItem
from snapshot import SNAPSHOT_PATH, load_snapshot


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # stdout carries the report
    )


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable duration."""
    if seconds is None:
        return "?"

    # Round once so a remainder never shows as 60s
    minutes, secs = divmod(round(seconds), 60)
    if minutes == 0:
        return f"{secs}s"
    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {secs}s"


def format_date(iso_date: Optional[str]) -> str:
    """Format YYYY-MM-DD as 'Mar 1'."""
    if not iso_date:
        return "N/A"
    d = datetime.strptime(iso_date, "%Y-%m-%d")
    return f"{d.strftime('%b')} {d.day}"


def print_section(title: str):
    """Print a section header."""
    print(f"\n{'=' * 50}")
    print(f"  {title}")
    print('=' * 50)


def print_bar(value: int, max_value: int, width: int = 30) -> str:
    """Generate a text-based bar."""
    if max_value == 0:
        return ""
    filled = int((value / max_value) * width)
    return "█" * filled + "░" * (width - filled)


def to_jsonable(obj):
    """Convert statistics into JSON-friendly values.

    Media items are reduced to their identity so that events and sessions
    do not repeat whole histories.
    """
    if isinstance(obj, MediaItem):
        return {"id": obj.id, "title": obj.title, "kind": obj.kind, "thumbnail": obj.thumbnail}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def display_year(stats: YearStatistics):
    """Display statistics in the terminal."""
    general = stats.general

    if general.total_count_events == 0 and general.total_play_events == 0:
        print(f"\nNo activity found for {stats.year}.")
        return

    print(f"\n{'*' * 50}")
    print(f"     UNWIND - {stats.year}")
    print('*' * 50)

    print_section("OVERVIEW")
    print(f"  Count events:     {general.total_count_events:,}")
    print(f"  Play events:      {general.total_play_events:,}")
    print(f"  New clips:        {general.new_clips:,}")
    print(f"  New stills:       {general.new_stills:,}")
    if stats.top_item:
        print(f"  Top item:         {stats.top_item.name[:30]} ({stats.top_item.count})")

    print_section("STREAKS")
    streak = stats.streaks.streak
    dry = stats.streaks.dry_spell
    print(f"  Longest streak:     {streak.length} days "
          f"({format_date(streak.start)} - {format_date(streak.end)})")
    print(f"  Longest dry spell:  {dry.length} days "
          f"({format_date(dry.start)} - {format_date(dry.end)})")

    if stats.sessions.sessions:
        print_section("SESSIONS")
        print("  Shortest:")
        for s in stats.sessions.shortest:
            print(f"    {s.item.title[:34]:<34} {format_duration(s.duration_seconds):>12}")
        print("  Longest:")
        for s in stats.sessions.longest:
            print(f"    {s.item.title[:34]:<34} {format_duration(s.duration_seconds):>12}")

    for title, entries in (
        ("TOP PEOPLE", stats.top_people),
        ("TOP TAGS", stats.top_tags),
        ("TOP TAGS BY PLAYS", stats.top_play_tags),
    ):
        if not entries:
            continue
        print_section(title)
        max_count = entries[0].count
        for i, entry in enumerate(entries, 1):
            bar = print_bar(entry.count, max_count, 20)
            print(f"  {i:2}. {entry.name[:24]:<24} {bar} {entry.count:>4}")

    if stats.top_media:
        print_section("TOP MEDIA")
        max_count = stats.top_media[0].count_total
        for i, media in enumerate(stats.top_media, 1):
            bar = print_bar(media.count_total, max_count, 15)
            print(f"  {i:2}. {media.item.title[:24]:<24} {bar} {media.count_total:>3} "
                  f"({media.play_total} plays)")

    print_section("ACTIVITY DISTRIBUTION")
    for split in stats.distribution:
        print(f"  {split.kind:<6} with: {split.with_activity:>5}  "
              f"without: {split.without_activity:>5}  total: {split.total:>5}")

    peak = stats.peak_day
    if peak.date:
        print_section(f"PEAK DAY - {format_date(peak.date)} ({peak.count})")
        max_hourly = max(peak.hourly)
        for label, count in zip(HOURLY_LABELS, peak.hourly):
            if count:
                print(f"  {label:>5} {print_bar(count, max_hourly, 25)} {count:>3}")

    efficiency = stats.efficiency
    if efficiency.most_efficient:
        print_section("EFFICIENCY")
        print("  Most efficient:")
        for e in efficiency.most_efficient:
            print(f"    {e.item.title[:30]:<30} {e.count_total}/{e.play_total} ({e.ratio:.2f})")
        print("  Least efficient:")
        for e in efficiency.least_efficient:
            print(f"    {e.item.title[:30]:<30} {e.count_total}/{e.play_total} ({e.ratio:.2f})")

    print_section("BY MONTH")
    monthly = stats.timeline.monthly_totals
    max_monthly = max(monthly)
    for name, count in zip(MONTH_NAMES, monthly):
        print(f"  {name[:3]:<4} {print_bar(count, max_monthly, 30)} {count:>4}")

    print(f"\n{'*' * 50}\n")


def display_library(stats: LibraryStatistics):
    """Display all-time library statistics in the terminal."""
    if not stats.top_items:
        print("\nNo counted items in the library.")
        return

    print(f"\n{'*' * 50}")
    print("     LIBRARY - ALL TIME")
    print('*' * 50)

    for title, entries in (
        ("TOP ITEMS", stats.top_items),
        ("BY TAG (items)", stats.tag_occurrences),
        ("BY PERSON", stats.by_person),
        ("BY STUDIO", stats.by_studio),
    ):
        if not entries:
            continue
        print_section(title)
        max_count = entries[0].count
        for i, entry in enumerate(entries, 1):
            bar = print_bar(entry.count, max_count, 20)
            print(f"  {i:2}. {entry.name[:24]:<24} {bar} {entry.count:>4}")

    print_section("BY RELEASE YEAR")
    max_year = max(total for _, total in stats.by_release_year)
    for label, total in stats.by_release_year:
        print(f"  {label:<8} {print_bar(total, max_year, 30)} {total:>4}")

    print_section("CORRELATIONS")
    for label, corr in (("plays", stats.count_vs_plays), ("play time", stats.count_vs_play_duration)):
        r = "n/a" if corr.coefficient is None else f"{corr.coefficient:+.2f}"
        print(f"  Count vs. {label:<10} r = {r:>5}  ({len(corr.points)} items)")

    print_section("ACTIVITY DISTRIBUTION")
    for split in stats.distribution:
        print(f"  {split.kind:<6} with: {split.with_activity:>5}  "
              f"without: {split.without_activity:>5}  total: {split.total:>5}")

    print(f"\n{'*' * 50}\n")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Display a year in review from a media-library snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  unwind-stats                       Show this year's stats
  unwind-stats --year 2024           Show stats for 2024
  unwind-stats --years               List years with activity
  unwind-stats --year 2024 --json    Dump 2024 stats as JSON
  unwind-stats --library             Show all-time library charts
        """
    )

    parser.add_argument('--year', type=int, help='Year to review (default: current year)')
    parser.add_argument('--snapshot', type=Path, default=SNAPSHOT_PATH,
                        help=f'Snapshot JSON file (default: {SNAPSHOT_PATH.name})')
    parser.add_argument('--years', action='store_true', help='List years with activity')
    parser.add_argument('--library', action='store_true', help='Show all-time library statistics')
    parser.add_argument('--json', action='store_true', help='Print statistics as JSON')
    parser.add_argument('--utc', action='store_true', help='Use UTC instead of local time')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.snapshot.exists():
        print(f"No snapshot found at {args.snapshot}.")
        print("Export the media-library API response to JSON and pass it with --snapshot.")
        return

    tz = timezone.utc if args.utc else None
    snapshot = load_snapshot(args.snapshot)

    if args.years:
        years = available_years(snapshot.items, tz)
        if args.json:
            print(json.dumps(years))
        elif years:
            print("\n".join(str(y) for y in years))
        else:
            print("No activity found.")
        return

    if args.library:
        library = compute_library_statistics(
            snapshot.items,
            snapshot.totals,
            resolve_person_images=snapshot.resolve_person_images,
        )
        if args.json:
            print(json.dumps(to_jsonable(library), indent=2))
        else:
            display_library(library)
        return

    year = args.year or datetime.now(tz).year
    stats = compute_year_statistics(
        year,
        snapshot.items,
        snapshot.totals,
        tz=tz,
        resolve_person_images=snapshot.resolve_person_images,
    )

    if args.json:
        print(json.dumps(to_jsonable(stats), indent=2))
    else:
        display_year(stats)


if __name__ == "__main__":
    main()
