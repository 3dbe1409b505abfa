from __future__ import annotations

import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

LOGGER = logging.getLogger(__name__)

FILTER_TERMS_OPTION = "filterTerms"
REPLACEMENT_TEXT_OPTION = "replacementText"

_MISSING = object()


class SettingsStoreError(RuntimeError):
    """Raised when the backing storage cannot be read or written."""


class SettingsStore(Protocol):
    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the stored option or `default` when it is unset."""

    def update(self, name: str, value: str) -> bool:
        """Store an option. Returns True if the stored value changed."""

    def delete(self, name: str) -> bool:
        """Remove an option. Returns True if it existed."""


class InMemorySettingsStore:
    """Dictionary backed options, used by tests and when no file is configured."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._values.get(name, default)

    def update(self, name: str, value: str) -> bool:
        with self._lock:
            if self._values.get(name, _MISSING) == value:
                return False
            self._values[name] = value
            return True

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._values.pop(name, _MISSING) is not _MISSING


class JsonFileSettingsStore:
    """
    Persist every option as one JSON object on disk.

    The file is read on each access so that a value written by another process
    is picked up on the next render. Writes go through a temporary file and a
    rename so readers never observe a half-written document.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsStoreError(
                f"Unable to read settings file {self._path}: {exc}"
            ) from exc
        if not isinstance(payload, dict):
            raise SettingsStoreError(
                f"Settings file {self._path} must contain a JSON object."
            )
        return payload

    def _dump(self, values: Mapping[str, Any]) -> None:
        tmp_path: Optional[Path] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=self._path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                json.dump(values, handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise SettingsStoreError(
                f"Unable to write settings file {self._path}: {exc}"
            ) from exc

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            value = self._load().get(name, default)
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def update(self, name: str, value: str) -> bool:
        with self._lock:
            values = self._load()
            if values.get(name, _MISSING) == value:
                return False
            values[name] = value
            self._dump(values)
        LOGGER.debug("Stored option %s in %s", name, self._path)
        return True

    def delete(self, name: str) -> bool:
        with self._lock:
            values = self._load()
            if name not in values:
                return False
            del values[name]
            self._dump(values)
        return True
