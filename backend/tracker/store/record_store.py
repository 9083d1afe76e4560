"""JSON-file backed collections with integer ids and per-owner scoping."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordStore:
    """
    One named collection persisted as a JSON array in a single file.

    Reads fail open: a missing, unreadable or malformed file is an empty
    collection. Writes replace the whole file atomically. Every
    load -> mutate -> save window runs under the collection's lock, so
    concurrent writers in the same process cannot lose each other's updates.
    """

    def __init__(self, path: str | Path, *, owner_key: str = "user_id") -> None:
        self.path = Path(path)
        self.owner_key = owner_key
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self.path.stem

    # -- raw file access -------------------------------------------------

    def _read_file(self) -> list[Record]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Collection %s has no backing file yet", self.name)
            return []
        except OSError as exc:
            logger.warning("Collection %s is unreadable, treating as empty: %s", self.name, exc)
            return []

        try:
            parsed = json.loads(text)
        except ValueError as exc:
            logger.warning("Collection %s is not valid JSON, treating as empty: %s", self.name, exc)
            return []

        if not isinstance(parsed, list):
            logger.warning("Collection %s does not hold a JSON array, treating as empty", self.name)
            return []

        records = [record for record in parsed if isinstance(record, dict)]
        skipped = len(parsed) - len(records)
        if skipped:
            logger.warning(
                "Collection %s has %d non-object entries; they are ignored and dropped on the next write",
                self.name,
                skipped,
            )
        return records

    def _write_file(self, records: list[Record]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def load_all(self) -> list[Record]:
        return await asyncio.to_thread(self._read_file)

    async def save_all(self, records: list[Record]) -> None:
        await asyncio.to_thread(self._write_file, list(records))

    @staticmethod
    def next_id(records: list[Record]) -> int:
        """One past the largest id in the collection, or 1 when empty."""
        ids = [record["id"] for record in records if isinstance(record.get("id"), int)]
        return max(ids, default=0) + 1

    def _matches(self, record: Record, record_id: int, owner_id: Any | None) -> bool:
        if record.get("id") != record_id:
            return False
        return owner_id is None or record.get(self.owner_key) == owner_id

    # -- reads -----------------------------------------------------------

    async def filter(self, predicate: Callable[[Record], bool]) -> list[Record]:
        return [record for record in await self.load_all() if predicate(record)]

    async def find_first(self, predicate: Callable[[Record], bool]) -> Record | None:
        for record in await self.load_all():
            if predicate(record):
                return record
        return None

    async def find_by_id(self, record_id: int, owner_id: Any | None = None) -> Record | None:
        return await self.find_first(lambda record: self._matches(record, record_id, owner_id))

    async def list_by_owner(self, owner_id: Any) -> list[Record]:
        return await self.filter(lambda record: record.get(self.owner_key) == owner_id)

    # -- writes ----------------------------------------------------------

    async def insert(
        self,
        fields: Record,
        *,
        guard: Callable[[list[Record]], None] | None = None,
    ) -> Record:
        """
        Assign the next id to ``fields`` and persist it.

        ``guard`` runs against the current contents inside the write lock and
        may raise to abort the insert (used for uniqueness checks).
        """
        async with self._lock:
            records = await self.load_all()
            if guard is not None:
                guard(records)

            record = {"id": self.next_id(records), **{k: v for k, v in fields.items() if k != "id"}}
            records.append(record)
            await self.save_all(records)

        return record

    async def update_by_id(
        self,
        record_id: int,
        fields: Record,
        owner_id: Any | None = None,
    ) -> Record | None:
        """Shallow-merge ``fields`` into the matching record; ids and owner are immutable."""
        patch = {k: v for k, v in fields.items() if k not in ("id", self.owner_key)}

        async with self._lock:
            records = await self.load_all()
            for index, record in enumerate(records):
                if self._matches(record, record_id, owner_id):
                    updated = {**record, **patch}
                    records[index] = updated
                    await self.save_all(records)
                    return updated

        return None

    async def delete_by_id(self, record_id: int, owner_id: Any) -> Record | None:
        """Remove the first record matching both id and owner; None when absent."""
        async with self._lock:
            records = await self.load_all()
            for index, record in enumerate(records):
                if self._matches(record, record_id, owner_id):
                    removed = records.pop(index)
                    await self.save_all(records)
                    return removed

        return None
