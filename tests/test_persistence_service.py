"""
Tests for the JSON file store and the persistence service.
"""
import json
import tempfile
import unittest
from unittest.mock import patch

from ultiscore.models import EventKind, MatchEvent, MatchState, TeamSide
from ultiscore.services import JsonFileStore, PersistenceService, StorageFullError
from ultiscore.utils import STORAGE_KEYS

PERSIST_NOW = "ultiscore.services.persistence_service.now_ts"
DAY = 24 * 60 * 60


class JsonFileStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.store = JsonFileStore(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_set_get_delete(self) -> None:
        self.assertIsNone(self.store.get("gameState"))
        self.store.set("gameState", '{"a": 1}')
        self.assertEqual(self.store.get("gameState"), '{"a": 1}')
        self.assertEqual(self.store.keys(), ["gameState"])

        self.store.delete("gameState")
        self.store.delete("gameState")
        self.assertEqual(self.store.keys(), [])

    def test_rejects_path_like_keys(self) -> None:
        for key in ("", "../escape", ".hidden"):
            with self.assertRaises(ValueError):
                self.store.set(key, "{}")

    def test_capacity_limit(self) -> None:
        store = JsonFileStore(self.tmp.name, max_bytes=10)
        store.set("small", "12345")
        # Overwriting an entry only counts the difference
        store.set("small", "1234567890")
        with self.assertRaises(StorageFullError):
            store.set("other", "x")
        self.assertEqual(store.usage_bytes(), 10)


class PersistenceServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.store = JsonFileStore(self.tmp.name)
        self.service = PersistenceService(self.store)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def sample_state(self, timestamp=None) -> MatchState:
        return MatchState(
            team_a_name="Red",
            team_b_name="Blue",
            events=[
                MatchEvent(kind=EventKind.MATCH_START, event_id=1),
                MatchEvent(
                    kind=EventKind.SCORE, team_side=TeamSide.A, team_name="Red",
                    scorer="Alice", assistor="Bob", event_id=2,
                ),
            ],
            match_started=True,
            timestamp=timestamp,
        )

    def test_snapshot_round_trip(self) -> None:
        with patch(PERSIST_NOW, return_value=5000.0):
            self.assertTrue(self.service.save_match_snapshot(self.sample_state()))

        loaded = self.service.load_match_snapshot()
        self.assertEqual(loaded.timestamp, 5000.0)
        self.assertEqual(loaded.match_id, "Red vs Blue")
        self.assertEqual(len(loaded.events), 2)
        self.assertEqual(loaded.next_event_id, 3)
        self.assertEqual(self.service.load_from_storage(STORAGE_KEYS["LAST_SAVE"]), 5000.0)

    def test_corrupt_entries_are_absent(self) -> None:
        self.store.set(STORAGE_KEYS["GAME_STATE"], "{not json")
        self.assertIsNone(self.service.load_match_snapshot())
        self.assertEqual(self.service.load_from_storage(STORAGE_KEYS["GAME_STATE"], {}), {})

        self.store.set(STORAGE_KEYS["GAME_STATE"], json.dumps({"events": [{"id": 1, "kind": "bogus"}]}))
        self.assertIsNone(self.service.load_match_snapshot())

        self.store.set(STORAGE_KEYS["GAME_STATE"], "[1, 2]")
        self.assertIsNone(self.service.load_match_snapshot())

    def test_is_recent(self) -> None:
        state = self.sample_state(timestamp=1000.0)
        with patch(PERSIST_NOW, return_value=1000.0 + 23 * 60 * 60):
            self.assertTrue(PersistenceService.is_recent(state))
        with patch(PERSIST_NOW, return_value=1000.0 + DAY + 1):
            self.assertFalse(PersistenceService.is_recent(state))
        self.assertFalse(PersistenceService.is_recent(self.sample_state()))

    def test_roster_cache_expires_after_a_day(self) -> None:
        teams = {"Red": ["Alice", "Bob"]}
        with patch(PERSIST_NOW, return_value=1000.0):
            self.service.save_roster_cache(teams)
        with patch(PERSIST_NOW, return_value=1000.0 + 3600):
            self.assertEqual(self.service.load_roster_cache(), teams)
        with patch(PERSIST_NOW, return_value=1000.0 + DAY + 1):
            self.assertIsNone(self.service.load_roster_cache())
        self.assertIsNone(self.store.get(STORAGE_KEYS["TEAMS_DATA"]))

    def test_full_store_evicts_expired_roster_and_retries(self) -> None:
        with patch(PERSIST_NOW, return_value=0.0):
            self.service.save_roster_cache({"Red": ["x" * 2000]})

        state = self.sample_state(timestamp=10 * DAY)
        self.store.max_bytes = len(json.dumps(state.to_json())) + 50

        with patch(PERSIST_NOW, return_value=10 * DAY):
            self.assertTrue(self.service.save_match_snapshot(state))

        self.assertIsNone(self.store.get(STORAGE_KEYS["TEAMS_DATA"]))
        self.assertIsNotNone(self.service.load_match_snapshot())

    def test_full_store_reports_failure(self) -> None:
        self.store.max_bytes = 10
        with patch(PERSIST_NOW, return_value=1000.0):
            self.assertFalse(self.service.save_match_snapshot(self.sample_state()))
        self.assertIsNone(self.service.load_match_snapshot())

    def test_cleanup_removes_week_old_snapshot(self) -> None:
        self.service.save_match_snapshot(self.sample_state(timestamp=1000.0))
        with patch(PERSIST_NOW, return_value=1000.0 + 6 * DAY):
            self.service.cleanup_old_data()
        self.assertIsNotNone(self.service.load_match_snapshot())

        with patch(PERSIST_NOW, return_value=1000.0 + 8 * DAY):
            self.service.cleanup_old_data()
        self.assertIsNone(self.service.load_match_snapshot())

    def test_storage_info_and_clear(self) -> None:
        self.service.save_match_snapshot(self.sample_state(timestamp=42.0))
        info = self.service.get_storage_info()
        self.assertEqual(info["item_count"], 2)
        self.assertEqual(info["last_save"], 42.0)
        self.assertGreater(info["total_size"], 0)

        self.service.clear_all_data()
        self.assertEqual(self.service.get_storage_info()["item_count"], 0)


if __name__ == "__main__":
    unittest.main()
