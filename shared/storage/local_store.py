"""
Durable local key/value storage.

Entries are named strings persisted one file per key under the state
directory. Writes are atomic: content goes to a temp file in the same
directory, is fsynced, then renamed over the target, so readers never
observe a partially written entry.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from shared.logging.logger import get_logger
from shared.storage.paths import get_state_dir

log = get_logger("shared.local_store")

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStore:
    """
    Named string entries backed by the filesystem.

    Read errors are logged and reported as a missing entry. Write errors
    propagate as OSError; callers decide whether they are fatal.
    """

    def __init__(self, base_dir: Path | str | None = None):
        self._base_dir = Path(base_dir) if base_dir else get_state_dir()
        self._base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_dir / key

    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w", dir=path.parent, delete=False, encoding="utf-8"
        ) as tmp:
            tmp.write(value)
            tmp.flush()
            os.fsync(tmp.fileno())
            temp_path = Path(tmp.name)

        try:
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except Exception as e:
            log.warning(f"Failed to read local entry {key}: {e}")
            return None

    def set_item(self, key: str, value: str) -> None:
        self._write_atomic(self._path_for(key), value)

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
