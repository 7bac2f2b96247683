"""
Local storage implementations.

In-memory storage for tests and development, and a JSON-file variant
that keeps one file per collection under a data directory.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from riddles.storage.base import MetadataStorage, StorageProvider
from riddles.storage.players import PlayerRepository
from riddles.storage.riddles import RiddleRepository

logger = logging.getLogger(__name__)


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage for development and tests."""
    
    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._sequences: dict[str, int] = {}
    
    async def next_id(self, collection: str) -> int:
        self._sequences[collection] = self._sequences.get(collection, 0) + 1
        return self._sequences[collection]
    
    async def save(self, collection: str, id: str | int, data: dict[str, Any]) -> None:
        if collection not in self._data:
            self._data[collection] = {}
        self._data[collection][str(id)] = dict(data)
    
    async def get(self, collection: str, id: str | int) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(str(id))
        return dict(doc) if doc is not None else None
    
    async def delete(self, collection: str, id: str | int) -> bool:
        if collection in self._data and str(id) in self._data[collection]:
            del self._data[collection][str(id)]
            return True
        return False
    
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []
        
        results = list(self._data[collection].values())
        
        # Apply filters
        if filters:
            results = [
                doc for doc in results
                if all(doc.get(key) == value for key, value in filters.items())
            ]
        
        # Apply pagination
        return [dict(doc) for doc in results[offset:offset + limit]]
    
    async def update(self, collection: str, id: str | int, updates: dict[str, Any]) -> bool:
        if collection in self._data and str(id) in self._data[collection]:
            self._data[collection][str(id)].update(updates)
            return True
        return False
    
    async def count(self, collection: str) -> int:
        return len(self._data.get(collection, {}))


# =============================================================================
# JSON File Metadata Storage
# =============================================================================


class JsonFileMetadataStorage(InMemoryMetadataStorage):
    """
    Documents held in memory and written through to `<collection>.json`.
    
    Files hold a list of documents, the same layout the service used
    before it moved to a database.
    """
    
    def __init__(self, base_path: str = "./data"):
        super().__init__()
        self.base_path = Path(base_path)
    
    def _path(self, collection: str) -> Path:
        return self.base_path / f"{collection}.json"
    
    async def open(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        for path in self.base_path.glob("*.json"):
            collection = path.stem
            with open(path, encoding="utf-8") as f:
                docs = json.load(f)
            self._data[collection] = {str(doc["id"]): doc for doc in docs}
            int_ids = [doc["id"] for doc in docs if isinstance(doc.get("id"), int)]
            self._sequences[collection] = max(int_ids, default=0)
            logger.info(f"Loaded {len(docs)} documents from {path}")
    
    async def close(self) -> None:
        for collection in self._data:
            self._flush(collection)
    
    def _flush(self, collection: str) -> None:
        path = self._path(collection)
        tmp_path = path.with_suffix(".json.tmp")
        docs = list(self._data.get(collection, {}).values())
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(docs, f, indent=2)
        os.replace(tmp_path, path)
    
    async def save(self, collection: str, id: str | int, data: dict[str, Any]) -> None:
        await super().save(collection, id, data)
        self._flush(collection)
    
    async def delete(self, collection: str, id: str | int) -> bool:
        deleted = await super().delete(collection, id)
        if deleted:
            self._flush(collection)
        return deleted
    
    async def update(self, collection: str, id: str | int, updates: dict[str, Any]) -> bool:
        updated = await super().update(collection, id, updates)
        if updated:
            self._flush(collection)
        return updated


# =============================================================================
# Factory
# =============================================================================


def create_storage(backend: str = "memory", data_dir: str = "./data") -> StorageProvider:
    """Create a StorageProvider with local implementations."""
    if backend == "memory":
        metadata: MetadataStorage = InMemoryMetadataStorage()
    elif backend == "json":
        metadata = JsonFileMetadataStorage(data_dir)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")
    
    return StorageProvider(
        metadata=metadata,
        players=PlayerRepository(metadata),
        riddles=RiddleRepository(metadata),
    )
