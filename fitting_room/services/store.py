"""Durable key-value stores for engine state."""

import json
import logging
from contextlib import suppress
from pathlib import Path
from typing import Protocol

from ..errors import PersistenceFailure

logger = logging.getLogger(__name__)


class DurableStore(Protocol):
    """Minimal key-value persistence contract."""
    
    def get(self, key: str) -> str | None: ...
    
    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, mainly for tests and ephemeral sessions."""
    
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
    
    def get(self, key: str) -> str | None:
        return self._data.get(key)
    
    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object file.
    
    Every ``set`` rewrites the whole file through a temporary sibling so a
    crash mid-write never leaves a truncated file behind.
    """
    
    def __init__(self, path: Path):
        self.path = path
    
    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceFailure(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Store {self.path} does not contain a JSON object")
        return data
    
    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None
    
    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceFailure:
            logger.warning("Discarding unreadable store file %s", self.path)
            data = {}
        data[key] = value
        
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise PersistenceFailure(f"Cannot write store {self.path}: {e}") from e
