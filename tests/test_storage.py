"""Tests for store persistence backends and the persisted store base."""

import json

from meeting_tasks.models import ViewMode
from meeting_tasks.stores.storage import JsonFileStorage, MemoryStorage
from meeting_tasks.stores.team import TeamStore


class TestMemoryStorage:
    def test_round_trip_copies(self):
        storage = MemoryStorage()
        state = {"view_mode": "team"}
        storage.save("team-storage", state)
        state["view_mode"] = "all"

        assert storage.load("team-storage") == {"view_mode": "team"}

    def test_missing_key(self):
        assert MemoryStorage().load("never-saved") is None


class TestJsonFileStorage:
    def test_save_creates_directory(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "state")
        storage.save("auth-storage", {"is_authenticated": True})

        path = tmp_path / "state" / "auth-storage.json"
        assert json.loads(path.read_text()) == {"is_authenticated": True}
        assert storage.load("auth-storage") == {"is_authenticated": True}

    def test_no_temp_files_left(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.save("team-storage", {"view_mode": "all"})
        storage.save("team-storage", {"view_mode": "team"})

        assert [p.name for p in tmp_path.iterdir()] == ["team-storage.json"]

    def test_corrupt_file_loads_as_none(self, tmp_path):
        (tmp_path / "auth-storage.json").write_text("{not json")

        assert JsonFileStorage(tmp_path).load("auth-storage") is None

    def test_non_object_loads_as_none(self, tmp_path):
        (tmp_path / "auth-storage.json").write_text("[1, 2]")

        assert JsonFileStorage(tmp_path).load("auth-storage") is None


class TestPersistedStore:
    """Behaviour shared by every store, exercised through TeamStore."""

    def test_subscribers_notified_and_unsubscribed(self, mock_api):
        store = TeamStore(mock_api)
        seen = []
        unsubscribe = store.subscribe(lambda state: seen.append(state.view_mode))

        store.set_view_mode("team")
        unsubscribe()
        store.set_view_mode("personal")

        assert seen == [ViewMode.TEAM]

    def test_only_persisted_fields_saved(self, mock_api, memory_storage):
        store = TeamStore(mock_api, memory_storage)
        store._set(is_loading=True)

        assert memory_storage.load("team-storage") is None

        store.set_view_mode(ViewMode.TEAM)

        assert memory_storage.load("team-storage") == {"team": None, "view_mode": "team"}

    def test_invalid_saved_state_ignored(self, mock_api, memory_storage):
        memory_storage.save("team-storage", {"view_mode": "everyone"})

        store = TeamStore(mock_api, memory_storage)

        assert store.view_mode == ViewMode.ALL

    def test_unknown_saved_keys_ignored(self, mock_api, memory_storage):
        memory_storage.save("team-storage", {"view_mode": "team", "is_loading": True})

        store = TeamStore(mock_api, memory_storage)

        assert store.view_mode == ViewMode.TEAM
        assert store.is_loading is False
