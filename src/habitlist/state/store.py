"""Durable key-value stores the task list persists into."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from .errors import StoreUnavailable
from .persistence import Persistence

logger = logging.getLogger(__name__)


class StoreAdapter(ABC):
    """Asynchronous get/set of opaque string values by key.

    A save either fully replaces the stored value or fails with
    StoreUnavailable, leaving the previous value in place.
    """

    @abstractmethod
    async def load(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if nothing is stored."""

    @abstractmethod
    async def save(self, key: str, value: str) -> None:
        """Replace the value stored under key."""


class JsonFileStore(StoreAdapter):
    """Stores every key in one JSON object file, written atomically.

    File I/O runs in a worker thread so the event loop never blocks on disk.
    Writes from one process are serialized by a lock so a read-modify-write
    of the file never interleaves with another.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()
        self._io_lock: Optional[asyncio.Lock] = None

    async def load(self, key: str) -> Optional[Any]:
        async with self._lock():
            data = await asyncio.to_thread(self._read)
        value = data.get(key)
        logger.debug("Loaded key=%s from %s (present=%s)", key, self.path, value is not None)
        return value

    async def save(self, key: str, value: str) -> None:
        async with self._lock():
            await asyncio.to_thread(self._write, key, value)
        logger.debug("Saved key=%s to %s (%d chars)", key, self.path, len(value))

    def _lock(self) -> asyncio.Lock:
        # Bound lazily to the running loop, not the one current at construction.
        if self._io_lock is None:
            self._io_lock = asyncio.Lock()
        return self._io_lock

    def _read(self) -> dict:
        try:
            return Persistence.read_json(self.path)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            raise StoreUnavailable(f"Cannot read store {self.path}: {exc}") from exc

    def _write(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        try:
            Persistence.save_json(self.path, data)
        except (OSError, TypeError) as exc:
            raise StoreUnavailable(f"Cannot write store {self.path}: {exc}") from exc


__all__ = ["StoreAdapter", "JsonFileStore"]
