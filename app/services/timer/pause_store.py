"""
Timer pause persistence.

A local pause never reaches the backend. It is kept in a small key-value
store on the client (the browser's localStorage in the web app, a JSON file
for Python clients) so that it survives reloads. Every failure of that
store is absorbed here: pausing is a convenience, not a guarantee.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import StorageError
from .models.timer_state import LocalPauseOverride, TimerSubject

logger = logging.getLogger(__name__)

PAUSE_KEY_PREFIX = "timer-pause:"


class KeyValueStorage(Protocol):
    """localStorage-shaped storage port"""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; lost when the process exits"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Storage backed by a single JSON object on disk.

    The file is re-read on every access so several controllers (or
    processes) on the same profile see each other's writes. Writes go
    through a temporary file and os.replace so a crash never leaves a
    half-written document behind.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        try:
            if not self._path.exists():
                return {}
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self._path} does not contain a JSON object")
        return data

    def _write_all(self, items: Dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


class PauseStore:
    """Reads and writes local pause overrides, one entry per subject"""

    def __init__(self, storage: KeyValueStorage, key_prefix: str = PAUSE_KEY_PREFIX):
        self._storage = storage
        self._key_prefix = key_prefix

    def _key(self, subject_id: str) -> str:
        return f"{self._key_prefix}{subject_id}"

    def save_pause(self, subject_id: str, override: LocalPauseOverride) -> bool:
        """
        Persist a pause override.

        Returns:
            True if it was written, False if storage failed (the pause then
            only lives in the controller's memory)
        """
        try:
            self._storage.set_item(self._key(subject_id), override.model_dump_json())
            return True
        except Exception as e:
            logger.warning(f"Could not persist timer pause for {subject_id}: {e}")
            return False

    def load_pause(self, subject: TimerSubject) -> Optional[LocalPauseOverride]:
        """
        Load the pause override for a subject if it still applies.

        An entry recorded for a different timer session (the subject was
        restarted or resumed elsewhere, or its duration changed) is stale:
        it is removed and None is returned. Unreadable entries are treated
        the same way.
        """
        key = self._key(subject.id)
        try:
            raw = self._storage.get_item(key)
        except Exception as e:
            logger.warning(f"Could not read timer pause for {subject.id}: {e}")
            return None

        if raw is None:
            return None

        try:
            override = LocalPauseOverride.model_validate(json.loads(raw))
        except (ValueError, TypeError) as e:  # includes pydantic validation errors
            logger.info(f"Discarding unreadable timer pause for {subject.id}: {e}")
            self.clear_pause(subject.id)
            return None

        if not override.matches(subject):
            logger.info(f"Discarding stale timer pause for {subject.id}")
            self.clear_pause(subject.id)
            return None

        return override

    def clear_pause(self, subject_id: str) -> None:
        """Remove any pause override for the subject"""
        try:
            self._storage.remove_item(self._key(subject_id))
        except Exception as e:
            logger.warning(f"Could not clear timer pause for {subject_id}: {e}")
