"""Persistent key/value storage for Pocket Dice.

Holds the high score and the sound preference. The game only talks to the
small KeyValueStore interface, so a frontend can swap in whatever durable
store its host provides. JsonFileStore keeps everything in one JSON object
at ~/.pocket_dice.json. No pygame dependency.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "yahtzee_highscore"
SOUND_ENABLED_KEY = "sound_enabled"


def _default_path() -> Path:
    """Return the default path for the store file."""
    return Path.home() / ".pocket_dice.json"


class KeyValueStore(ABC):
    """Minimal durable key/value store."""

    @abstractmethod
    def get(self, key, default=None): ...

    @abstractmethod
    def set(self, key, value) -> None: ...


class MemoryStore(KeyValueStore):
    """In-process store, for tests and frontends without persistence."""

    def __init__(self, data: dict | None = None) -> None:
        self.data = dict(data or {})

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value) -> None:
        self.data[key] = value


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object on disk.

    A missing or corrupt file reads as empty. Writes go through a temp file
    and os.replace() so a crash never leaves a half-written store; write
    errors are logged and otherwise ignored.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_path()

    def _load(self) -> dict:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError):
            logger.warning("Ignoring unreadable store file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key, default=None):
        return self._load().get(key, default)

    def set(self, key, value) -> None:
        data = self._load()
        data[key] = value
        try:
            raw = json.dumps(data, indent=2).encode()
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            closed = False
            try:
                os.write(fd, raw)
                os.close(fd)
                closed = True
                os.replace(tmp, self.path)
            except BaseException:
                if not closed:
                    os.close(fd)
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
                raise
        except OSError:
            logger.warning("Could not write store file %s", self.path, exc_info=True)


def load_high_score(store: KeyValueStore) -> int:
    """Stored high score, 0 when missing or not a non-negative integer."""
    value = store.get(HIGH_SCORE_KEY, 0)
    try:
        score = int(value)
    except (TypeError, ValueError):
        return 0
    return max(score, 0)


def save_high_score(store: KeyValueStore, score: int) -> bool:
    """Write score only if it beats the stored one. Returns True if written."""
    if score <= load_high_score(store):
        return False
    store.set(HIGH_SCORE_KEY, score)
    logger.info("New high score: %d", score)
    return True


def load_sound_enabled(store: KeyValueStore) -> bool:
    """Stored sound preference, on by default."""
    value = store.get(SOUND_ENABLED_KEY, True)
    return value if isinstance(value, bool) else True


def save_sound_enabled(store: KeyValueStore, enabled: bool) -> None:
    store.set(SOUND_ENABLED_KEY, bool(enabled))
