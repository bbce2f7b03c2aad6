"""
Best-score persistence: a single integer under a fixed key.

Stores raise StorageError on any failure. Callers decide whether a
failure matters; the game driver treats it as non-fatal.
"""
import json
import logging
import math
from pathlib import Path
from typing import Protocol, Union

from missile_command.gameplay.constants import BEST_SCORE_STORAGE_KEY

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Reading or writing the best score failed."""


class BestScoreStore(Protocol):
    """Anything that can load and save the best score."""

    def load_best_score(self) -> int:
        ...

    def save_best_score(self, score: int) -> None:
        ...


def sanitize_score(value) -> int:
    """Coerce a stored value to a non-negative int; garbage becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = int(value.strip(), 10)
        except ValueError:
            return 0
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, int(value))


class InMemoryBestScoreStore:
    """Keeps the best score for the lifetime of the process only."""

    def __init__(self, initial: int = 0):
        self.score = sanitize_score(initial)
        self.save_count = 0

    def load_best_score(self) -> int:
        return self.score

    def save_best_score(self, score: int) -> None:
        self.score = sanitize_score(score)
        self.save_count += 1


class JsonBestScoreStore:
    """
    Stores the best score in a JSON object on disk, keyed by a fixed id.

    Other keys already present in the file are preserved on save.
    A missing file loads as 0. "~" is expanded on first use, so a
    missing home directory surfaces as a StorageError from load/save.
    """

    def __init__(self, path: Union[str, Path], key: str = BEST_SCORE_STORAGE_KEY):
        self.raw_path = Path(path)
        self.key = key

    @property
    def path(self) -> Path:
        try:
            return self.raw_path.expanduser()
        except RuntimeError as e:
            raise StorageError(f"Could not resolve {self.raw_path}: {e}") from e

    def _read(self, path: Path) -> dict:
        try:
            if not path.exists():
                return {}
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {path}")
        return data

    def load_best_score(self) -> int:
        return sanitize_score(self._read(self.path).get(self.key, 0))

    def save_best_score(self, score: int) -> None:
        path = self.path
        try:
            data = self._read(path)
        except StorageError:
            logger.warning(f"Overwriting unreadable score file {path}")
            data = {}
        data[self.key] = sanitize_score(score)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.debug(f"Saved best score {data[self.key]} to {path}")
