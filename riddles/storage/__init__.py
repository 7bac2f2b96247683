"""
Storage abstractions.

- MetadataStorage → in-memory, JSON files, or a database
- PlayerRepository → the user directory
- RiddleRepository → riddle documents
"""

from riddles.storage.base import (
    MetadataStorage,
    StorageProvider,
    Collections,
)
from riddles.storage.local import (
    InMemoryMetadataStorage,
    JsonFileMetadataStorage,
    create_storage,
)
from riddles.storage.players import PlayerRepository
from riddles.storage.riddles import RiddleRepository

__all__ = [
    "MetadataStorage",
    "StorageProvider",
    "Collections",
    "InMemoryMetadataStorage",
    "JsonFileMetadataStorage",
    "create_storage",
    "PlayerRepository",
    "RiddleRepository",
]
