"""
Persistence service for the Ultimate sideline scorekeeper.

This module handles saving and loading the match snapshot and the roster
cache as named JSON blobs in a key-value store. A full store is handled by
evicting stale entries and retrying once; corrupt entries are treated as
absent. The in-memory match always stays authoritative.
"""
import errno
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from ..models import MatchState
from ..utils import now_ts, STORAGE_KEYS
from ..utils.constants import (
    SNAPSHOT_MAX_AGE_SECONDS, ROSTER_CACHE_TTL_SECONDS, STALE_SNAPSHOT_SECONDS,
)
from ..utils.logger import get_logger

log = get_logger("services.persistence")


class StorageFullError(Exception):
    """Raised by a store when a write would exceed its capacity."""


class KeyValueStore(Protocol):
    """Named string blobs. Implementations raise StorageFullError when full."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class JsonFileStore:
    """
    Key-value store keeping one ``<key>.json`` file per entry.

    Writes go through a temporary file and an atomic rename so a crash never
    leaves a half-written snapshot behind.

    Args:
        directory: Folder holding the entries (created on first write)
        max_bytes: Optional capacity; writes beyond it raise StorageFullError
    """

    SUFFIX = ".json"

    def __init__(self, directory: str, max_bytes: Optional[int] = None):
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def _path(self, key: str) -> Path:
        if not key or os.sep in key or (os.altsep and os.altsep in key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        if self.max_bytes is not None:
            existing = path.stat().st_size if path.exists() else 0
            projected = self.usage_bytes() - existing + len(value.encode("utf-8"))
            if projected > self.max_bytes:
                raise StorageFullError(
                    f"Writing {key!r} needs {projected} bytes, capacity is {self.max_bytes}"
                )
        try:
            self._write_atomic(path, value)
        except OSError as exc:
            if exc.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise StorageFullError(str(exc)) from exc
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{self.SUFFIX}"))

    def usage_bytes(self) -> int:
        if not self.directory.exists():
            return 0
        return sum(p.stat().st_size for p in self.directory.glob(f"*{self.SUFFIX}"))

    @staticmethod
    def _write_atomic(target: Path, serialized: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w", dir=target.parent, delete=False, encoding="utf-8", suffix=".tmp"
        ) as tmp:
            tmp.write(serialized)
            tmp.flush()
            os.fsync(tmp.fileno())
            temp_path = Path(tmp.name)

        temp_path.replace(target)


class PersistenceService:
    """
    Service for persisting the match snapshot and roster cache.

    Args:
        store: Backing key-value store
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ------------------------------------------------------------------
    # Raw entries
    # ------------------------------------------------------------------
    def save_to_storage(self, key: str, data: Any) -> bool:
        """
        Serialize ``data`` as JSON under ``key``.

        On a full store, expired roster data and stale snapshots are evicted
        and the write is retried once.

        Returns:
            True if the data was written
        """
        serialized = json.dumps(data)
        try:
            self.store.set(key, serialized)
            return True
        except StorageFullError as exc:
            log.warning(f"Storage full while saving {key}: {exc}; cleaning up and retrying")

        self.cleanup_old_data()
        try:
            self.store.set(key, serialized)
            return True
        except StorageFullError as exc:
            log.error(f"Failed to save {key} after cleanup: {exc}")
            return False

    def load_from_storage(self, key: str, default: Any = None) -> Any:
        """Load the JSON entry under ``key``; missing or corrupt entries give ``default``."""
        raw = self.store.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            log.warning(f"Ignoring corrupt storage entry {key}: {exc}")
            return default

    def remove_from_storage(self, key: str) -> None:
        self.store.delete(key)

    # ------------------------------------------------------------------
    # Match snapshot
    # ------------------------------------------------------------------
    def save_match_snapshot(self, state: MatchState) -> bool:
        """Write the snapshot and the last-save marker."""
        if state.timestamp is None:
            state.timestamp = now_ts()
        saved = self.save_to_storage(STORAGE_KEYS["GAME_STATE"], state.to_json())
        if saved:
            self.save_to_storage(STORAGE_KEYS["LAST_SAVE"], state.timestamp)
        return saved

    def load_match_snapshot(self) -> Optional[MatchState]:
        """
        Load the stored snapshot.

        Returns:
            The snapshot, or None when absent or unreadable
        """
        data = self.load_from_storage(STORAGE_KEYS["GAME_STATE"])
        if not isinstance(data, dict):
            return None
        try:
            return MatchState.from_json(data)
        except (KeyError, TypeError, ValueError) as exc:
            log.warning(f"Ignoring unreadable match snapshot: {exc}")
            return None

    @staticmethod
    def is_recent(state: MatchState, max_age: float = SNAPSHOT_MAX_AGE_SECONDS) -> bool:
        """Whether the snapshot was written less than ``max_age`` seconds ago."""
        if not state.timestamp:
            return False
        return (now_ts() - float(state.timestamp)) < max_age

    def discard_match_snapshot(self) -> None:
        self.remove_from_storage(STORAGE_KEYS["GAME_STATE"])

    # ------------------------------------------------------------------
    # Roster cache
    # ------------------------------------------------------------------
    def save_roster_cache(self, teams: Dict[str, List[str]]) -> bool:
        current = now_ts()
        return self.save_to_storage(STORAGE_KEYS["TEAMS_DATA"], {
            "data": teams,
            "timestamp": current,
            "expires_at": current + ROSTER_CACHE_TTL_SECONDS,
        })

    def load_roster_cache(self) -> Optional[Dict[str, List[str]]]:
        """Cached roster, or None if missing or expired (expired entries are removed)."""
        stored = self.load_from_storage(STORAGE_KEYS["TEAMS_DATA"])
        if not isinstance(stored, dict) or not isinstance(stored.get("data"), dict):
            return None
        if now_ts() > float(stored.get("expires_at") or 0):
            self.remove_from_storage(STORAGE_KEYS["TEAMS_DATA"])
            return None
        return stored["data"]

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------
    def cleanup_old_data(self) -> None:
        """Evict the expired roster cache and snapshots older than seven days."""
        current = now_ts()

        teams = self.load_from_storage(STORAGE_KEYS["TEAMS_DATA"])
        if isinstance(teams, dict) and current > float(teams.get("expires_at") or 0):
            self.remove_from_storage(STORAGE_KEYS["TEAMS_DATA"])
            log.info("Evicted expired roster cache")

        snapshot = self.load_from_storage(STORAGE_KEYS["GAME_STATE"])
        if isinstance(snapshot, dict) and snapshot.get("timestamp"):
            if current - float(snapshot["timestamp"]) > STALE_SNAPSHOT_SECONDS:
                self.remove_from_storage(STORAGE_KEYS["GAME_STATE"])
                log.info("Evicted stale match snapshot")

    def clear_all_data(self) -> None:
        for key in STORAGE_KEYS.values():
            self.remove_from_storage(key)
        log.info("Cleared all stored data")

    def get_storage_info(self) -> Dict[str, Any]:
        total_size = 0
        keys = self.store.keys()
        for key in keys:
            raw = self.store.get(key)
            total_size += len(raw) if raw else 0
        return {
            "total_size": total_size,
            "item_count": len(keys),
            "last_save": self.load_from_storage(STORAGE_KEYS["LAST_SAVE"]),
        }
