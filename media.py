#!/usr/bin/env python3
"""
Media Items

Value types for media-library items and parsing of data-source records.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Dict, Any, Tuple

log = logging.getLogger(__name__)

CLIP = "clip"
STILL = "still"
MEDIA_KINDS = (CLIP, STILL)

# API type names mapped to media kinds
TYPENAME_KINDS = {
    "Scene": CLIP,
    "Image": STILL,
}

# (kind, id) identifies an item across both kinds
ItemKey = Tuple[str, str]


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    image_path: Optional[str] = None


@dataclass(frozen=True)
class Tag:
    id: str
    name: str


@dataclass(frozen=True)
class MediaItem:
    """A media item with its raw count and play histories.

    Histories hold the ISO-8601 strings exactly as the data source returned
    them; they are parsed during event extraction.
    """
    id: str
    title: str
    kind: str = CLIP
    created_at: Optional[str] = None
    count_history: tuple[str, ...] = ()
    play_history: tuple[str, ...] = ()
    people: tuple[Person, ...] = ()
    tags: tuple[Tag, ...] = ()
    thumbnail: Optional[str] = None
    studio: Optional[str] = None
    date: Optional[str] = None
    counter: Optional[int] = None
    play_count: Optional[int] = None
    play_duration: Optional[float] = None

    @property
    def is_clip(self) -> bool:
        return self.kind == CLIP

    @property
    def key(self) -> ItemKey:
        # Clips and stills are numbered independently
        return (self.kind, self.id)

    @property
    def total_count(self) -> int:
        """All-time count, falling back to the length of the count history."""
        if self.counter is not None:
            return self.counter
        return len(self.count_history)


def get_field(record: Dict, *keys) -> Any:
    """Get first present, non-null value, trying multiple key variations."""
    if not record:
        return None
    for key in keys:
        val = record.get(key)
        if val is not None:
            return val
    return None


def get_list(record: Dict, *keys) -> list:
    """Get a collection field, treating a missing or null value as empty."""
    val = get_field(record, *keys)
    if val is None:
        return []
    if isinstance(val, (list, tuple)):
        return list(val)
    return [val]


def get_int(record: Dict, *keys) -> Optional[int]:
    """Get field value as integer."""
    val = get_field(record, *keys)
    if val is not None:
        try:
            return int(val)
        except (ValueError, TypeError):
            log.debug(f"Ignoring non-integer {keys[0]} on item {record.get('id')}: {val!r}")
    return None


def get_float(record: Dict, *keys) -> Optional[float]:
    """Get field value as float."""
    val = get_field(record, *keys)
    if val is not None:
        try:
            return float(val)
        except (ValueError, TypeError):
            log.debug(f"Ignoring non-numeric {keys[0]} on item {record.get('id')}: {val!r}")
    return None


def get_studio(record: Dict) -> Optional[str]:
    studio = get_field(record, "studio")
    if isinstance(studio, dict):
        return studio.get("name") or None
    return str(studio) if studio else None


def get_kind(record: Dict) -> str:
    """Resolve the media kind from an explicit kind or the API type name."""
    kind = get_field(record, "kind")
    if kind in MEDIA_KINDS:
        return kind
    typename = get_field(record, "__typename")
    if typename in TYPENAME_KINDS:
        return TYPENAME_KINDS[typename]
    # Only clips carry a play history in the API
    if "play_history" in record or "play_count" in record:
        return CLIP
    return STILL


def get_title(record: Dict) -> str:
    title = get_field(record, "title")
    if title:
        return str(title)
    files = get_list(record, "files")
    if files and isinstance(files[0], dict) and files[0].get("path"):
        return PurePosixPath(files[0]["path"].replace("\\", "/")).name
    return str(get_field(record, "id") or "")


def get_thumbnail(record: Dict) -> Optional[str]:
    paths = get_field(record, "paths") or {}
    return get_field(paths, "screenshot", "thumbnail") or get_field(record, "thumbnail")


def person_from_record(record: Dict) -> Person:
    return Person(
        id=str(record["id"]),
        name=record.get("name") or str(record["id"]),
        image_path=record.get("image_path"),
    )


def tag_from_record(record: Dict) -> Tag:
    return Tag(id=str(record["id"]), name=record.get("name") or str(record["id"]))


def item_from_record(record: Dict[str, Any]) -> MediaItem:
    """Build a MediaItem from one data-source record.

    Accepts the API field names (o_history, o_counter, performers,
    __typename, paths) as well as the plain ones (count_history, counter,
    people, kind, thumbnail). Missing histories, people and tags are
    treated as empty; missing or non-numeric totals are left as None.
    """
    count_history = [str(v) for v in get_list(record, "o_history", "count_history") if v]
    play_history = [str(v) for v in get_list(record, "play_history") if v]
    created_at = get_field(record, "created_at")
    release_date = get_field(record, "date")

    people = []
    for p in get_list(record, "performers", "people"):
        if isinstance(p, dict) and p.get("id") is not None:
            people.append(person_from_record(p))
        else:
            log.debug(f"Ignoring malformed person on item {record.get('id')}: {p!r}")

    tags = []
    for t in get_list(record, "tags"):
        if isinstance(t, dict) and t.get("id") is not None:
            tags.append(tag_from_record(t))
        else:
            log.debug(f"Ignoring malformed tag on item {record.get('id')}: {t!r}")

    return MediaItem(
        id=str(record["id"]),
        title=get_title(record),
        kind=get_kind(record),
        created_at=str(created_at) if created_at is not None else None,
        count_history=tuple(count_history),
        play_history=tuple(play_history),
        people=tuple(people),
        tags=tuple(tags),
        thumbnail=get_thumbnail(record),
        studio=get_studio(record),
        date=str(release_date) if release_date is not None else None,
        counter=get_int(record, "o_counter", "counter"),
        play_count=get_int(record, "play_count"),
        play_duration=get_float(record, "play_duration"),
    )
