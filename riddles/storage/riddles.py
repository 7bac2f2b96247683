"""
Riddle repository.
"""

from __future__ import annotations

from typing import Any

from riddles.core.models import Riddle, RiddleLevel
from riddles.storage.base import Collections, MetadataStorage


class RiddleRepository:
    
    collection = Collections.RIDDLES
    
    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata
    
    async def insert(self, riddle: Riddle) -> Riddle:
        await self.metadata.save(self.collection, riddle.id, riddle.model_dump(mode="json"))
        return riddle
    
    async def get(self, riddle_id: str) -> Riddle | None:
        data = await self.metadata.get(self.collection, riddle_id)
        return Riddle.from_dict(data) if data else None
    
    async def find(
        self,
        level: RiddleLevel | None = None,
        limit: int = 50,
        skip: int = 0,
    ) -> list[Riddle]:
        """Riddles matching `level`, newest first."""
        filters = {"level": level.value} if level else None
        total = await self.metadata.count(self.collection)
        docs = await self.metadata.query(self.collection, filters, limit=total)
        riddles = [Riddle.from_dict(doc) for doc in docs]
        riddles.sort(key=lambda r: r.created_at, reverse=True)
        return riddles[skip:skip + limit]
    
    async def update(self, riddle_id: str, updates: dict[str, Any]) -> Riddle | None:
        if not await self.metadata.update(self.collection, riddle_id, updates):
            return None
        return await self.get(riddle_id)
    
    async def delete(self, riddle_id: str) -> bool:
        return await self.metadata.delete(self.collection, riddle_id)
    
    async def count(self) -> int:
        return await self.metadata.count(self.collection)
    
    async def questions(self) -> set[str]:
        return {riddle.question for riddle in await self.find(limit=await self.count())}
