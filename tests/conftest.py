"""Shared fixtures for unwind stats tests."""

from datetime import datetime, timezone

import pytest

from events import CountEvent, PlayEvent
from media import CLIP, MediaItem

UTC = timezone.utc


@pytest.fixture
def make_item():
    """Factory for MediaItem objects with sensible defaults."""

    def _make(
        item_id="1",
        title=None,
        kind=CLIP,
        counts=(),
        plays=(),
        people=(),
        tags=(),
        created_at=None,
        thumbnail=None,
        **fields,
    ) -> MediaItem:
        return MediaItem(
            id=item_id,
            title=title or f"Item {item_id}",
            kind=kind,
            created_at=created_at,
            count_history=tuple(counts),
            play_history=tuple(plays),
            people=tuple(people),
            tags=tuple(tags),
            thumbnail=thumbnail,
            **fields,
        )

    return _make


@pytest.fixture
def count_at():
    """Factory for a CountEvent at a UTC wall-clock time."""

    def _make(item: MediaItem, *args) -> CountEvent:
        return CountEvent(item=item, timestamp=datetime(*args, tzinfo=UTC))

    return _make


@pytest.fixture
def play_at():
    """Factory for a PlayEvent at a UTC wall-clock time."""

    def _make(item: MediaItem, *args) -> PlayEvent:
        return PlayEvent(item=item, timestamp=datetime(*args, tzinfo=UTC))

    return _make
