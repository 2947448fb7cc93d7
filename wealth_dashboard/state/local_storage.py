"""
Durable client-side key/value storage.

A small JSON file holding string values under string keys, the same
contract as browser local storage: values are strings, callers do their
own (de)serialization, and a missing key reads as None.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

logger = structlog.get_logger(__name__)


class LocalStorage:
    """
    JSON-file backed key/value store.

    The whole file is rewritten on every write (atomically, via a
    temporary file and rename). Fine for a handful of UI preferences.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("local_storage_unreadable", path=str(self._path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("local_storage_unreadable", path=str(self._path), error="not an object")
            return {}
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".local_storage.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def keys(self) -> list[str]:
        return sorted(self._read_all())
