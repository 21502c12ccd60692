"""Storage abstractions and adapters for game records.

A store keeps one record per game keyed by its id, plus a lightweight
games index (id, opponent name, date, created/updated timestamps) so a
listing view never has to load full records. ``save`` and ``delete`` keep
the index in sync.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from wpstat_events.models import GameRecord, GamesIndexEntry, StorageError

logger = logging.getLogger("wpstat_events.storage")

GAMES_INDEX_FILE = "games_index.json"
GAME_FILE_PREFIX = "game_"


class GameStore(ABC):
    """Persistence collaborator consumed by GameSession."""

    @abstractmethod
    def load(self, game_id: str) -> Optional[GameRecord]:
        """Return the stored record, or None when absent."""

    @abstractmethod
    def save(self, record: GameRecord) -> None:
        """Store (replace) a full record and upsert its index entry."""

    @abstractmethod
    def delete(self, game_id: str) -> None:
        """Remove a record and its index entry. Missing ids are ignored."""

    @abstractmethod
    def list_index(self) -> List[GamesIndexEntry]:
        """Return the games index in insertion order."""


def _upsert_entry(
    index: List[GamesIndexEntry], entry: GamesIndexEntry
) -> List[GamesIndexEntry]:
    for i, existing in enumerate(index):
        if existing.id == entry.id:
            return [*index[:i], entry, *index[i + 1:]]
    return [*index, entry]


class InMemoryGameStore(GameStore):
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._records: Dict[str, GameRecord] = {}
        self._index: List[GamesIndexEntry] = []

    def load(self, game_id: str) -> Optional[GameRecord]:
        return self._records.get(game_id)

    def save(self, record: GameRecord) -> None:
        self._records[record.id] = record
        self._index = _upsert_entry(self._index, GamesIndexEntry.from_record(record))

    def delete(self, game_id: str) -> None:
        self._records.pop(game_id, None)
        self._index = [e for e in self._index if e.id != game_id]

    def list_index(self) -> List[GamesIndexEntry]:
        return list(self._index)


class JsonFileGameStore(GameStore):
    """Directory-backed store writing one JSON file per game.

    Layout::

        <root>/games_index.json
        <root>/game_<id>.json

    Files that cannot be parsed are logged and treated as absent.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _game_path(self, game_id: str) -> Path:
        return self.root / f"{GAME_FILE_PREFIX}{game_id}.json"

    @property
    def _index_path(self) -> Path:
        return self.root / GAMES_INDEX_FILE

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc

    def _load_index(self) -> List[GamesIndexEntry]:
        raw = self._read_json(self._index_path)
        if not isinstance(raw, list):
            return []
        entries: List[GamesIndexEntry] = []
        for item in raw:
            try:
                entries.append(GamesIndexEntry.model_validate(item))
            except PydanticValidationError:
                logger.warning("Skipping malformed games index entry: %r", item)
        return entries

    def _save_index(self, index: List[GamesIndexEntry]) -> None:
        self._write_json(
            self._index_path, [e.model_dump(mode="json") for e in index]
        )

    def load(self, game_id: str) -> Optional[GameRecord]:
        raw = self._read_json(self._game_path(game_id))
        if raw is None:
            return None
        try:
            return GameRecord.from_dict(raw)
        except PydanticValidationError as exc:
            logger.warning("Stored game %s failed validation: %s", game_id, exc)
            return None

    def save(self, record: GameRecord) -> None:
        self._write_json(self._game_path(record.id), record.to_dict())
        index = _upsert_entry(self._load_index(), GamesIndexEntry.from_record(record))
        self._save_index(index)

    def delete(self, game_id: str) -> None:
        path = self._game_path(game_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {path}: {exc}") from exc
        self._save_index([e for e in self._load_index() if e.id != game_id])

    def list_index(self) -> List[GamesIndexEntry]:
        return self._load_index()

    def refresh_index(self) -> List[GamesIndexEntry]:
        """Add index entries for game files the index does not reference.

        The index can drift when part of the directory is removed or copied
        by hand. Returns the entries that were added.
        """
        index = self._load_index()
        known = {e.id for e in index}
        added: List[GamesIndexEntry] = []
        if not self.root.exists():
            return added
        for path in sorted(self.root.glob(f"{GAME_FILE_PREFIX}*.json")):
            game_id = path.stem[len(GAME_FILE_PREFIX):]
            if game_id in known:
                continue
            record = self.load(game_id)
            if record is None:
                continue
            entry = GamesIndexEntry.from_record(record)
            index.append(entry)
            added.append(entry)
        if added:
            logger.info("Recovered %d orphaned game file(s) into index", len(added))
            self._save_index(index)
        return added
