#!/usr/bin/env python3
"""Snapshot loading for unwind stats.

A snapshot is the media-library API response saved as JSON: the items
with activity, the unfiltered item counts per kind and, optionally, the
person images used for the top people list.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any

from media import CLIP, STILL, MediaItem, item_from_record

SNAPSHOT_PATH = Path(__file__).parent / "snapshot.json"

log = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """The snapshot payload does not have the expected structure."""


@dataclass(frozen=True)
class Snapshot:
    items: List[MediaItem]
    totals: Dict[str, int]
    person_images: Dict[str, str] = field(default_factory=dict)

    def resolve_person_images(self, person_ids: List[str]) -> Dict[str, str]:
        """Look up images for a batch of person ids."""
        return {pid: self.person_images[pid] for pid in person_ids if pid in self.person_images}


def _section(payload: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    section = payload.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise SnapshotError(f"'{name}' must be an object, got {type(section).__name__}")
    return section


def parse_snapshot(payload: Dict[str, Any]) -> Snapshot:
    """Build a Snapshot from a decoded API response."""
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    if isinstance(payload.get("data"), dict):
        payload = payload["data"]

    scenes = _section(payload, "findScenes")
    images = _section(payload, "findImages")
    if scenes is None and images is None:
        raise SnapshotError("Snapshot has neither 'findScenes' nor 'findImages'")

    items = []
    totals = {}
    for section, list_key, kind in ((scenes, "scenes", CLIP), (images, "images", STILL)):
        if section is None:
            continue
        records = section.get(list_key) or []
        for record in records:
            if "kind" not in record and "__typename" not in record:
                record = {**record, "kind": kind}
            try:
                items.append(item_from_record(record))
            except KeyError as e:
                raise SnapshotError(f"Record in '{list_key}' is missing {e}") from e
        if section.get("count") is not None:
            totals[kind] = int(section["count"])

    person_images = {}
    performers = _section(payload, "findPerformers") or {}
    for p in performers.get("performers") or []:
        if p.get("id") is not None and p.get("image_path"):
            person_images[str(p["id"])] = p["image_path"]

    return Snapshot(items=items, totals=totals, person_images=person_images)


def load_snapshot(path: Path = SNAPSHOT_PATH) -> Snapshot:
    """Read a snapshot file.

    Raises:
        FileNotFoundError: if the file does not exist.
        json.JSONDecodeError: if the file is not valid JSON.
        SnapshotError: if the JSON does not look like an API response.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    snapshot = parse_snapshot(payload)
    log.info(f"Loaded {len(snapshot.items)} items from {path}")
    return snapshot
