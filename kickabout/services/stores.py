"""
Roster and attendance stores for the Kickabout Teams application.

The services only talk to the abstract RosterStore/AttendanceStore
interfaces. Two backends are provided: an in-memory store for tests and
throwaway sessions, and a JSON file store that persists both collections to a
single file.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from ..models import AttendanceRecord, Player
from ..models.attendance import AttendanceKey
from ..utils import utc_now_iso
from .errors import PlayerNotFoundError, StoreError

logger = logging.getLogger(__name__)

# Fields a roster update may change; counters and ownership are store-managed
UPDATABLE_FIELDS = ("name", "rating", "position", "avatar")


class RosterStore(ABC):
    """Persists Player records scoped by owner."""

    @abstractmethod
    def list_players(self, owner_id: str) -> List[Player]:
        """Return the owner's players, newest first."""

    @abstractmethod
    def insert(self, player: Player) -> str:
        """Store a new player and return its assigned id."""

    @abstractmethod
    def update(self, owner_id: str, player_id: str, changes: Dict[str, Any]) -> None:
        """Apply a partial update to one player."""

    @abstractmethod
    def delete(self, owner_id: str, player_id: str) -> None:
        """Remove one player."""


class AttendanceStore(ABC):
    """Persists per-day attendance flags keyed by (owner, player, date)."""

    @abstractmethod
    def query(self, owner_id: str, day: date) -> List[AttendanceRecord]:
        """Return every record the owner has for ``day``."""

    @abstractmethod
    def upsert(self, records: Iterable[AttendanceRecord]) -> None:
        """Insert or overwrite records on their (owner, player, date) key."""


class InMemoryStore(RosterStore, AttendanceStore):
    """
    Dictionary-backed implementation of both stores.

    Players keep insertion order so listings can be returned newest first.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._players: Dict[str, Player] = {}
        self._attendance: Dict[AttendanceKey, AttendanceRecord] = {}

    # ==================== Roster ==================== #

    def list_players(self, owner_id: str) -> List[Player]:
        with self._lock:
            owned = [p for p in self._players.values() if p.owner_id == owner_id]
            return [copy.copy(p) for p in reversed(owned)]

    def insert(self, player: Player) -> str:
        if not player.owner_id:
            raise StoreError("Cannot store a player without an owner")
        with self._transaction():
            player_id = uuid4().hex
            stored = copy.copy(player)
            stored.id = player_id
            stored.created_at = utc_now_iso()
            self._players[player_id] = stored
            logger.debug("Inserted player %s for owner %s", player_id, player.owner_id)
            return player_id

    def update(self, owner_id: str, player_id: str, changes: Dict[str, Any]) -> None:
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise StoreError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        with self._transaction():
            stored = self._get_owned(owner_id, player_id)
            for name, value in changes.items():
                setattr(stored, name, value)

    def delete(self, owner_id: str, player_id: str) -> None:
        with self._transaction():
            self._get_owned(owner_id, player_id)
            del self._players[player_id]
            # Attendance rows belong to the player and go with it
            for key in [k for k in self._attendance if k[0] == owner_id and k[1] == player_id]:
                del self._attendance[key]

    # ==================== Attendance ==================== #

    def query(self, owner_id: str, day: date) -> List[AttendanceRecord]:
        with self._lock:
            return [
                record for key, record in self._attendance.items()
                if key[0] == owner_id and key[2] == day
            ]

    def upsert(self, records: Iterable[AttendanceRecord]) -> None:
        records = list(records)
        with self._transaction():
            for record in records:
                self._attendance[record.key] = record

    def attendance_count(self) -> int:
        """Total number of stored attendance rows."""
        with self._lock:
            return len(self._attendance)

    # ==================== Internals ==================== #

    def _get_owned(self, owner_id: str, player_id: str) -> Player:
        stored = self._players.get(player_id)
        if stored is None or stored.owner_id != owner_id:
            raise PlayerNotFoundError(f"Player not found: {player_id}")
        return stored

    @contextmanager
    def _transaction(self):
        """Serialise a mutation and hand it to ``_commit`` once applied."""
        with self._lock:
            yield
            self._commit()

    def _commit(self) -> None:
        """Hook for durable backends; the in-memory store has nothing to do."""
        pass


class JsonFileStore(InMemoryStore):
    """
    Store that mirrors its contents to a JSON file after every change.

    A failed write restores the previous in-memory contents and raises
    StoreError, so callers see the same "nothing changed" outcome as with any
    other store failure.
    """

    def __init__(self, file_path: str):
        super().__init__()
        self.file_path = file_path
        if os.path.exists(file_path):
            self._load()

    @contextmanager
    def _transaction(self):
        with self._lock:
            players_backup = copy.deepcopy(self._players)
            attendance_backup = dict(self._attendance)
            try:
                yield
                self._commit()
            except OSError as e:
                self._players = players_backup
                self._attendance = attendance_backup
                raise StoreError(f"Unable to save data: {e}") from e
            except Exception:
                self._players = players_backup
                self._attendance = attendance_backup
                raise

    def _commit(self) -> None:
        directory = os.path.dirname(self.file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        # Temp file beside the target; it replaces the target only once fully written
        fd, temp_path = tempfile.mkstemp(prefix=".kickabout-", suffix=".tmp", dir=directory or ".")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self.to_json(), f, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.file_path)
        except Exception:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def to_json(self) -> dict:
        """
        Snapshot both collections as a JSON-serializable dictionary.

        Returns:
            Dictionary with "players" and "attendance" lists
        """
        return {
            "players": [p.to_dict() for p in self._players.values()],
            "attendance": [r.to_dict() for r in self._attendance.values()],
        }

    def _load(self) -> None:
        """
        Load store contents from ``file_path``.

        Raises:
            StoreError: If the file cannot be read or parsed
        """
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            players = [Player.from_dict(item) for item in data.get("players", [])]
            records = [AttendanceRecord.from_dict(item) for item in data.get("attendance", [])]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Unable to load data file {self.file_path}: {e}") from e

        self._players = {p.id: p for p in players if p.id}
        self._attendance = {r.key: r for r in records}
        logger.info(
            "Loaded %d players and %d attendance records from %s",
            len(self._players), len(self._attendance), self.file_path
        )


def create_store(data_file: Optional[str] = None) -> InMemoryStore:
    """
    Build the store backend for a configured data file.

    Args:
        data_file: JSON file path, or None for an in-memory store

    Returns:
        Store implementing both RosterStore and AttendanceStore
    """
    if data_file:
        return JsonFileStore(data_file)
    return InMemoryStore()
