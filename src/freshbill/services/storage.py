"""Key-value stores backing the invoice and the product cache tiers.

``JsonFileStore`` is the durable store: one JSON file per key in the data
directory. ``MemoryStore`` lives only as long as the process and backs the
short cache tier.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from filelock import FileLock

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...

    def quarantine(self, key: str) -> Path | None: ...


def _backup_corrupt(path: Path) -> Path:
    """Rename a corrupt file to a timestamped backup before it gets overwritten."""
    ts = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    backup = path.with_name(f"{path.name}.corrupt.{ts}")
    path.rename(backup)
    logger.warning("Corrupt file backed up: %s → %s", path, backup)
    return backup


class JsonFileStore:
    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    @contextmanager
    def _locked(self, key: str) -> Iterator[Path]:
        """Hold an exclusive file lock during a read or write of *key*."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(path.with_suffix(".lock")):
            yield path

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if missing or unreadable.

        Unparseable files are moved aside so the next write starts clean.
        """
        with self._locked(key) as path:
            if not path.exists():
                return None
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, ValueError):
                _backup_corrupt(path)
                return None

    def set(self, key: str, value: Any) -> None:
        with self._locked(key) as path:
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(value, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
            os.replace(tmp, path)

    def remove(self, key: str) -> None:
        with self._locked(key) as path:
            path.unlink(missing_ok=True)

    def quarantine(self, key: str) -> Path | None:
        """Move a stored value that parsed but could not be used out of the way."""
        with self._locked(key) as path:
            if not path.exists():
                return None
            return _backup_corrupt(path)


class MemoryStore:
    """Process-scoped store, forgotten when the app exits."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        # Kept as JSON text; get() always returns a fresh copy.
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def quarantine(self, key: str) -> Path | None:
        self._data.pop(key, None)
        return None
