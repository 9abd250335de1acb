"""
Infrastructure layer: key-value store adapters.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from plantanim.config import settings
from plantanim.infrastructure.ports import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    """Process-local store; state is lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """
    Store backed by a single JSON object on disk.

    The whole file is rewritten on each change. Concurrent writers are not
    coordinated; the last write wins.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read state file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"State file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            tmp.replace(self.path)
        except OSError as e:
            raise StorageError(f"Cannot write state file {self.path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    async def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    async def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


# Singleton instance
_store: Optional[KeyValueStore] = None


def get_key_value_store() -> KeyValueStore:
    """
    Get or create the singleton store configured by ``state_file_path``.

    Returns:
        A JSON-file store when a path is configured, otherwise in-memory
    """
    global _store
    if _store is None:
        if settings.state_file_path:
            logger.info(f"Using JSON state file at {settings.state_file_path}")
            _store = JsonFileKeyValueStore(settings.state_file_path)
        else:
            logger.info("No state file configured, using in-memory state")
            _store = InMemoryKeyValueStore()
    return _store
