"""
Storage abstraction layer.

All persistence goes through these interfaces. This allows swapping
implementations (in-memory → JSON files → PostgreSQL, etc.) without
changing application code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured documents (players, riddles).
    
    Documents are plain JSON-compatible dicts keyed by id within a
    collection. Every call either succeeds or raises; callers do not
    retry or lock.
    """
    
    async def open(self) -> None:
        """Acquire connections / load data. Called once at startup."""
        pass
    
    async def close(self) -> None:
        """Release connections / flush data. Called once at shutdown."""
        pass
    
    @abstractmethod
    async def next_id(self, collection: str) -> int:
        """Allocate the next integer id for a collection."""
        pass
    
    @abstractmethod
    async def save(self, collection: str, id: str | int, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass
    
    @abstractmethod
    async def get(self, collection: str, id: str | int) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass
    
    @abstractmethod
    async def delete(self, collection: str, id: str | int) -> bool:
        """Delete a document."""
        pass
    
    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters, in insertion order."""
        pass
    
    @abstractmethod
    async def update(self, collection: str, id: str | int, updates: dict[str, Any]) -> bool:
        """Partial update of a document."""
        pass
    
    @abstractmethod
    async def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for the storage backend and the repositories built on it.
    
    Initialize once at app startup; services receive the repositories
    and never see the underlying implementation.
    """
    
    model_config = {"arbitrary_types_allowed": True}
    
    metadata: MetadataStorage
    players: Any  # PlayerRepository
    riddles: Any  # RiddleRepository
    
    async def open(self) -> None:
        await self.metadata.open()
    
    async def close(self) -> None:
        await self.metadata.close()


# =============================================================================
# Collection Names (for MetadataStorage)
# =============================================================================


class Collections:
    """Standard collection/table names."""
    
    PLAYERS = "players"
    RIDDLES = "riddles"
