"""
Player repository - the user directory.

Wraps MetadataStorage with typed Player records. Usernames are unique.
"""

from __future__ import annotations

from riddles.core.errors import ConflictError
from riddles.core.models import Player, Role
from riddles.storage.base import Collections, MetadataStorage


class PlayerRepository:
    """Lookup, creation and mutation of player records."""
    
    collection = Collections.PLAYERS
    
    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata
    
    async def get_by_id(self, player_id: int) -> Player | None:
        data = await self.metadata.get(self.collection, player_id)
        return Player.model_validate(data) if data else None
    
    async def get_by_username(self, username: str) -> Player | None:
        docs = await self.metadata.query(self.collection, {"username": username}, limit=1)
        return Player.model_validate(docs[0]) if docs else None
    
    async def create(
        self,
        username: str,
        password_hash: str | None = None,
        role: Role = Role.USER,
    ) -> Player:
        if await self.get_by_username(username):
            raise ConflictError("Username already exists")
        
        player = Player(
            id=await self.metadata.next_id(self.collection),
            username=username,
            password_hash=password_hash,
            role=role,
        )
        await self.save(player)
        return player
    
    async def save(self, player: Player) -> None:
        await self.metadata.save(self.collection, player.id, player.model_dump(mode="json"))
    
    async def update_role(self, player_id: int, role: Role) -> Player | None:
        updated = await self.metadata.update(self.collection, player_id, {"role": role.value})
        return await self.get_by_id(player_id) if updated else None
    
    async def update_password(self, player_id: int, password_hash: str) -> bool:
        return await self.metadata.update(
            self.collection, player_id, {"password_hash": password_hash}
        )
    
    async def delete(self, player_id: int) -> bool:
        return await self.metadata.delete(self.collection, player_id)
    
    async def list_all(self) -> list[Player]:
        total = await self.metadata.count(self.collection)
        docs = await self.metadata.query(self.collection, limit=total)
        return [Player.model_validate(doc) for doc in docs]
    
    async def leaderboard(self, limit: int = 10) -> list[Player]:
        """Players who solved at least one riddle, fastest first."""
        ranked = [p for p in await self.list_all() if p.best_time is not None]
        ranked.sort(key=lambda p: (p.best_time, p.username))
        return ranked[:limit]
