"""
Unit tests for saved palette persistence.
"""
import json
import random
import threading
import time
from datetime import datetime, timezone

import pytest

from toolkit.errors import InvalidPaletteError, PaletteNotFoundError
from toolkit.services.colors.conversion import Color
from toolkit.services.colors.generation import generate_palette
from toolkit.services.palette_store import PaletteStore, colors_from_record
from toolkit.services.storage import InMemoryStore, JsonFileStore

FIXED_MOMENT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_MOMENT


@pytest.fixture
def storage():
    return InMemoryStore()


@pytest.fixture
def store(storage):
    return PaletteStore(storage, clock=fixed_clock)


class TestSaveAndReload:
    """Test the save/list/reload cycle"""

    def test_saved_palette_survives_reload(self, storage):
        palette = generate_palette(rng=random.Random(11))
        PaletteStore(storage).save("Sunset", palette)

        reloaded = PaletteStore(storage).list()
        assert len(reloaded) == 1
        assert reloaded[0]["name"] == "Sunset"
        assert [c["hex"] for c in reloaded[0]["colors"]] == [c.hex for c in palette]
        assert colors_from_record(reloaded[0]) == palette

    def test_record_layout(self, store, storage):
        record = store.save("Ocean", [Color.from_hex("#336699")])

        assert record == {
            "id": "1704164645678",
            "name": "Ocean",
            "colors": [{"hex": "#336699", "rgb": "rgb(51, 102, 153)", "hsl": "hsl(210, 50%, 40%)"}],
            "createdAt": "2024-01-02T03:04:05.678Z",
        }
        assert json.loads(storage.get("colorPalettes")) == [record]

    def test_ids_unique_within_same_millisecond(self, store):
        first = store.save("One", [Color(0, 0, 0)])
        second = store.save("Two", [Color(0, 0, 0)])

        assert first["id"] != second["id"]
        assert int(second["id"]) == int(first["id"]) + 1

    def test_save_order_preserved(self, store):
        for name in ("a", "b", "c"):
            store.save(name, [Color(1, 2, 3)])
        assert [r["name"] for r in store.list()] == ["a", "b", "c"]

    def test_name_is_stripped(self, store):
        assert store.save("  Dusk  ", [Color(0, 0, 0)])["name"] == "Dusk"

    def test_custom_key(self, storage):
        PaletteStore(storage, key="other").save("x", [Color(0, 0, 0)])
        assert storage.get("colorPalettes") is None
        assert storage.get("other") is not None


class TestValidation:
    """Test rejected saves"""

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name(self, store, name):
        with pytest.raises(InvalidPaletteError):
            store.save(name, [Color(0, 0, 0)])
        assert store.list() == []

    @pytest.mark.parametrize("count", [0, 9])
    def test_color_count(self, store, count):
        with pytest.raises(InvalidPaletteError):
            store.save("name", [Color(0, 0, 0)] * count)


class TestGetAndDelete:
    """Test lookup and removal"""

    def test_get(self, store):
        record = store.save("Find me", [Color(9, 9, 9)])
        assert store.get(record["id"]) == record

    def test_get_missing(self, store):
        with pytest.raises(PaletteNotFoundError):
            store.get("404")

    def test_delete(self, store):
        keep = store.save("keep", [Color(0, 0, 0)])
        drop = store.save("drop", [Color(0, 0, 0)])

        assert store.delete(drop["id"]) == drop
        assert store.list() == [keep]

    def test_delete_missing(self, store):
        store.save("keep", [Color(0, 0, 0)])
        with pytest.raises(PaletteNotFoundError):
            store.delete("missing")
        assert len(store.list()) == 1


class TestCorruptStorage:
    """Test recovery from corrupt stored data"""

    @pytest.mark.parametrize("raw", [
        "{not json",
        '{"a": 1}',
        '[{"id": "1"}]',
        "42",
        '[{"id": 1, "name": "x", "colors": [{"hex": "#000000"}], "createdAt": "t"}]',
        '[{"id": "1", "name": "x", "colors": [{"hex": "#000000"}], "createdAt": "t"}]',
        '[{"id": "1", "name": "x", "colors": [{"hex": "#zz", "rgb": "a", "hsl": "b"}], "createdAt": "t"}]',
        '[{"id": "1", "name": null, "colors": [], "createdAt": "t"}]',
    ])
    def test_corrupt_value_resets_to_empty(self, storage, raw):
        storage.set("colorPalettes", raw)
        store = PaletteStore(storage)

        assert store.list() == []
        assert storage.get("colorPalettes") == "[]"

    def test_well_formed_record_kept(self, storage):
        raw = ('[{"id": "1", "name": "x", "colors": [{"hex": "#fff", "rgb": "rgb(255, 255, 255)", '
               '"hsl": "hsl(0, 0%, 100%)"}], "createdAt": "t"}]')
        storage.set("colorPalettes", raw)

        records = PaletteStore(storage).list()
        assert [r["id"] for r in records] == ["1"]
        assert storage.get("colorPalettes") == raw

    def test_save_after_reset(self, storage):
        storage.set("colorPalettes", "{not json")
        store = PaletteStore(storage)

        store.save("fresh", [Color(0, 0, 0)])
        assert [r["name"] for r in store.list()] == ["fresh"]


class SlowReadStore(InMemoryStore):
    """In-memory backend whose reads stall long enough for writers to interleave."""

    def get(self, key):
        value = super().get(key)
        time.sleep(0.05)
        return value


class TestConcurrentWrites:
    """Test that parallel writers never drop each other's records"""

    def _run(self, *targets):
        threads = [threading.Thread(target=t) for t in targets]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_parallel_saves_both_kept(self):
        store = PaletteStore(SlowReadStore())

        self._run(
            lambda: store.save("first", [Color(0, 0, 0)]),
            lambda: store.save("second", [Color(255, 255, 255)]),
        )

        assert sorted(r["name"] for r in store.list()) == ["first", "second"]

    def test_parallel_save_and_delete(self):
        store = PaletteStore(SlowReadStore())
        doomed = store.save("doomed", [Color(0, 0, 0)])

        self._run(
            lambda: store.delete(doomed["id"]),
            lambda: store.save("kept", [Color(255, 255, 255)]),
        )

        assert [r["name"] for r in store.list()] == ["kept"]


class TestJsonFileStore:
    """Test the on-disk backend"""

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "data" / "palettes.json")
        PaletteStore(JsonFileStore(path)).save("Sunset", [Color.from_hex("#ff8800")])

        records = PaletteStore(JsonFileStore(path)).list()
        assert [r["name"] for r in records] == ["Sunset"]

    def test_get_set_delete(self, tmp_path):
        backend = JsonFileStore(str(tmp_path / "kv.json"))
        assert backend.get("k") is None

        backend.set("k", "v")
        assert backend.get("k") == "v"
        assert backend.delete("k") is True
        assert backend.delete("k") is False
        assert backend.get("k") is None

    def test_unreadable_file_starts_empty(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text("not json at all", encoding="utf-8")
        backend = JsonFileStore(str(path))

        assert backend.get("colorPalettes") is None
        backend.set("colorPalettes", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"colorPalettes": "[]"}


class TestInMemoryStore:
    def test_initial_data(self):
        backend = InMemoryStore({"a": "1"})
        assert backend.get("a") == "1"
        assert backend.delete("a") is True
        assert backend.get("a") is None
