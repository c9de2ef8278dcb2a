"""
Durable storage for persisted store state.

Each store saves a JSON object under its own key. Writes replace the whole
object (last write wins); there is no merge between concurrent writers.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger(__name__)


class StateStorage(Protocol):
    """Key/value storage for store snapshots."""

    def load(self, key: str) -> dict[str, Any] | None: ...

    def save(self, key: str, state: dict[str, Any]) -> None: ...


class MemoryStorage:
    """Process-local storage. State is lost on restart."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def load(self, key: str) -> dict[str, Any] | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, state: dict[str, Any]) -> None:
        self._data[key] = json.dumps(state)


class JsonFileStorage:
    """
    One JSON file per key under a directory.

    Files are written to a temporary sibling and renamed into place so a
    crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def load(self, key: str) -> dict[str, Any] | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning('storage.load_failed', key=key, path=str(path), error=str(e))
            return None
        if not isinstance(data, dict):
            logger.warning('storage.unexpected_shape', key=key, path=str(path))
            return None
        return data

    def save(self, key: str, state: dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f'.{key}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(state, f)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
