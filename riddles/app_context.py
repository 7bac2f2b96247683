"""
Application context - everything a request needs, built once per process.

Replaces module-level clients: the context owns the storage handles and
the services built on them, is opened at startup and closed at shutdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from riddles.auth.service import AuthService
from riddles.config import Settings
from riddles.services.players import PlayerService
from riddles.services.riddles import RiddleService
from riddles.storage import StorageProvider, create_storage

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    storage: StorageProvider
    auth: AuthService
    players: PlayerService
    riddles: RiddleService
    
    @classmethod
    def from_settings(cls, settings: Settings, storage: StorageProvider | None = None) -> AppContext:
        storage = storage or create_storage(settings.storage_backend, settings.data_dir)
        return cls(
            settings=settings,
            storage=storage,
            auth=AuthService(settings, storage.players),
            players=PlayerService(storage.players),
            riddles=RiddleService(storage.riddles),
        )
    
    async def open(self) -> None:
        await self.storage.open()
        logger.info(f"Storage opened ({self.settings.storage_backend})")
    
    async def close(self) -> None:
        await self.storage.close()
        logger.info("Storage closed")
