from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException

from .config import settings
from .store.record_store import RecordStore


@dataclass
class Storage:
    users: RecordStore
    expenses: RecordStore
    goals: RecordStore


def open_storage(data_dir: str | Path) -> Storage:
    root = Path(data_dir)
    return Storage(
        users=RecordStore(root / "users.json"),
        expenses=RecordStore(root / "expenses.json"),
        goals=RecordStore(root / "goals.json"),
    )


# Shared collections used by FastAPI dependencies. One RecordStore per file so
# that each collection has exactly one write lock.
storage: Storage | None = None


async def init_storage() -> None:
    global storage

    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    storage = open_storage(settings.data_dir)


async def close_storage() -> None:
    global storage

    storage = None


async def get_storage() -> AsyncIterator[Storage]:
    if storage is None:
        raise HTTPException(status_code=500, detail="Storage is not initialized")

    yield storage
