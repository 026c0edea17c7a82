"""
Saved palette store.

Saved palettes are kept as one JSON array of
``{id, name, colors: [{hex, rgb, hsl}], createdAt}`` records under a single key of
an injected KeyValueStore.
"""

import json
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger

from toolkit.errors import InvalidPaletteError, PaletteNotFoundError
from toolkit.services.colors.conversion import Color, hex_to_rgb
from toolkit.services.storage import KeyValueStore
from toolkit.utils.ids import generate_palette_id

MAX_SAVED_COLORS = 8
_RECORD_TEXT_KEYS = ("id", "name", "createdAt")
_COLOR_KEYS = ("hex", "rgb", "hsl")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _is_color_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    if not all(isinstance(entry.get(key), str) for key in _COLOR_KEYS):
        return False
    try:
        hex_to_rgb(entry["hex"])
    except ValueError:
        return False
    return True


def _is_record(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and all(isinstance(item.get(key), str) for key in _RECORD_TEXT_KEYS)
        and isinstance(item.get("colors"), list)
        and all(_is_color_entry(c) for c in item["colors"])
    )


def color_record(color: Color) -> Dict[str, str]:
    return {"hex": color.hex, "rgb": color.css_rgb, "hsl": color.css_hsl}


def colors_from_record(record: Dict[str, Any]) -> List[Color]:
    """Rebuild Color values from a stored record."""
    return [Color.from_hex(entry["hex"]) for entry in record["colors"]]


class PaletteStore:
    """CRUD over saved palettes."""

    def __init__(self,
                 storage: KeyValueStore,
                 key: str = "colorPalettes",
                 clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.key = key
        self._clock = clock or _utc_now
        # Held across load -> persist
        self._lock = Lock()

    def _load(self) -> List[Dict[str, Any]]:
        raw = self.storage.get(self.key)
        if raw is None:
            return []

        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as e:
            return self._reset(f"malformed JSON: {str(e)}")

        if not isinstance(records, list) or not all(_is_record(r) for r in records):
            return self._reset("unexpected record layout")
        return records

    def _reset(self, reason: str) -> List[Dict[str, Any]]:
        logger.warning(f"Saved palettes under '{self.key}' are corrupt ({reason}); resetting")
        self.storage.set(self.key, "[]")
        return []

    def _persist(self, records: List[Dict[str, Any]]) -> None:
        self.storage.set(self.key, json.dumps(records))

    def list(self) -> List[Dict[str, Any]]:
        """All saved palettes in save order."""
        with self._lock:
            return self._load()

    def get(self, palette_id: str) -> Dict[str, Any]:
        with self._lock:
            records = self._load()
        for record in records:
            if record["id"] == palette_id:
                return record
        raise PaletteNotFoundError(palette_id)

    def save(self, name: str, colors: Sequence[Color]) -> Dict[str, Any]:
        """
        Save a named palette.

        Raises:
            InvalidPaletteError: If the name is blank or the color count is not 1-8
        """
        name = (name or "").strip()
        if not name:
            raise InvalidPaletteError("Palette name must not be empty")
        if not 1 <= len(colors) <= MAX_SAVED_COLORS:
            raise InvalidPaletteError(
                f"A palette holds 1-{MAX_SAVED_COLORS} colors, got {len(colors)}"
            )

        with self._lock:
            records = self._load()
            moment = self._clock()
            record = {
                "id": generate_palette_id((r["id"] for r in records), round(moment.timestamp() * 1000)),
                "name": name,
                "colors": [color_record(c) for c in colors],
                "createdAt": _iso_timestamp(moment),
            }
            records.append(record)
            self._persist(records)

        logger.info(f"Saved palette '{name}' ({record['id']}) with {len(colors)} colors")
        return record

    def delete(self, palette_id: str) -> Dict[str, Any]:
        with self._lock:
            records = self._load()
            remaining = [r for r in records if r["id"] != palette_id]
            if len(remaining) == len(records):
                raise PaletteNotFoundError(palette_id)
            self._persist(remaining)
        logger.info(f"Deleted palette {palette_id}")
        return next(r for r in records if r["id"] == palette_id)
