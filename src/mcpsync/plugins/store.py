"""Local plugin store.

A durable key-value mapping kept in a single JSON file. Reads fail soft
(an unreadable store looks empty), writes fail loud. File I/O runs in a
worker thread so the store can be awaited from the sync pass.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

from ..errors import StorageReadError, StorageWriteError
from .models import PluginRecord

logger = logging.getLogger(__name__)


class PluginStore:
    """JSON-file backed key-value store."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageReadError(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageReadError(f"Store {self.path} is not a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    def load_sync(self, key: str) -> Any:
        """Return the value stored under key, or None.

        Read failures are logged and treated as an empty store.
        """
        try:
            return self._read_all().get(key)
        except StorageReadError as e:
            logger.warning("Failed to read plugins: %s", e)
            return None

    def save_sync(self, key: str, value: Any) -> None:
        """Store value under key, keeping every other key."""
        try:
            try:
                data = self._read_all()
            except StorageReadError as e:
                logger.warning("Overwriting unreadable store: %s", e)
                data = {}
            data[key] = value
            self._write_all(data)
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(f"Cannot write store {self.path}: {e}") from e

    async def load(self, key: str) -> Any:
        return await asyncio.to_thread(self.load_sync, key)

    async def save(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self.save_sync, key, value)

    @asynccontextmanager
    async def transaction(self, key: str) -> AsyncIterator["StoreTransaction"]:
        """Hold exclusive access to the store for one load/save cycle."""
        async with self._lock:
            yield StoreTransaction(self, key)


class StoreTransaction:
    """Plugin list access bound to one store key."""

    def __init__(self, store: PluginStore, key: str):
        self.store = store
        self.key = key

    async def load(self) -> List[PluginRecord]:
        value = await self.store.load(self.key)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("Ignoring non-list value under %r", self.key)
            return []
        records = []
        for index, item in enumerate(value):
            try:
                records.append(PluginRecord.from_dict(item))
            except (AttributeError, TypeError, ValueError) as e:
                err = StorageReadError(f"Cannot parse plugin {index} under {self.key!r}: {e}")
                logger.warning("Failed to read plugins: %s", err)
                records.append(PluginRecord(identity="", external_key="", raw=item))
        return records

    async def save(self, records: List[PluginRecord]) -> None:
        await self.store.save(self.key, [r.to_dict() for r in records])

    async def save_value(self, key: str, value: Any) -> None:
        await self.store.save(key, value)
