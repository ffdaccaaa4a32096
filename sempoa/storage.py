from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from sempoa.core.errors import SempoaError
from sempoa.core.levels import LevelRepository
from sempoa.core.progress import ProgressStore

logger = logging.getLogger(__name__)


def default_progress_path() -> Path:
    return Path.home() / ".sempoa" / "progress.json"


class ProgressFile:
    """Persists a ProgressStore record to disk across app restarts.

    File: ~/.sempoa/progress.json. Only raw counters and the current level are
    written; unlock and completion flags are recomputed after loading.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or default_progress_path()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self, levels: LevelRepository) -> ProgressStore:
        """Return the saved progress, or a fresh store when the file is missing or unusable."""
        if not self._file_path.exists():
            return ProgressStore(levels)
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return ProgressStore(levels)

        try:
            store = ProgressStore.from_record(levels, payload)
        except (SempoaError, ValueError) as e:
            logger.warning("Ignoring invalid progress in %s: %s", self._file_path, e)
            return ProgressStore(levels)
        logger.info("Loaded progress from %s", self._file_path)
        return store

    def save(self, store: ProgressStore) -> None:
        payload = store.to_record()
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
