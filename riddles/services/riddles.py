"""
Riddle service - CRUD over the riddle repository, plus seeding.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

import yaml

from riddles.core.errors import NotFoundError, ValidationError
from riddles.core.models import Riddle, RiddleLevel
from riddles.storage.riddles import RiddleRepository

logger = logging.getLogger(__name__)

INITIAL_RIDDLES_PATH = Path(__file__).parent.parent / "resources" / "initial_riddles.yaml"


def _parse_level(value: Any) -> RiddleLevel:
    try:
        return RiddleLevel(value)
    except ValueError:
        levels = ", ".join(level.value for level in RiddleLevel)
        raise ValidationError(f"Invalid level '{value}'. Expected one of: {levels}")


def _require_text(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid or missing '{field}'")
    return value.strip()


def validate_riddle_data(data: dict[str, Any] | None, partial: bool = False) -> dict[str, Any]:
    """
    Check riddle input and return the cleaned fields.
    
    With `partial`, only the fields present are checked, and at least
    one is required.
    """
    if not data:
        raise ValidationError("Missing riddle data")
    
    cleaned: dict[str, Any] = {}
    for field in ("question", "answer"):
        if not partial or field in data:
            cleaned[field] = _require_text(data, field)
    if data.get("level") is not None:
        cleaned["level"] = _parse_level(data["level"])
    
    if partial and not cleaned:
        raise ValidationError("Nothing to update")
    return cleaned


def load_riddle_file(path: Path | str) -> list[dict[str, Any]]:
    """Read seed riddles from YAML (a top-level `riddles:` list)."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return data.get("riddles", [])


class RiddleService:
    
    def __init__(self, riddles: RiddleRepository, seed_path: Path | str = INITIAL_RIDDLES_PATH):
        self.riddles = riddles
        self.seed_path = Path(seed_path)
    
    async def list_riddles(
        self,
        level: str | None = None,
        limit: int = 50,
        skip: int = 0,
    ) -> list[Riddle]:
        if limit < 1 or skip < 0:
            raise ValidationError("limit must be at least 1 and skip cannot be negative")
        return await self.riddles.find(
            level=_parse_level(level) if level else None,
            limit=limit,
            skip=skip,
        )
    
    async def get_riddle(self, riddle_id: str) -> Riddle:
        riddle = await self.riddles.get(riddle_id)
        if riddle is None:
            raise NotFoundError("Riddle not found")
        return riddle
    
    async def random_riddle(self) -> Riddle:
        riddles = await self.riddles.find(limit=await self.riddles.count())
        if not riddles:
            raise NotFoundError("No riddles found in database")
        return random.choice(riddles)
    
    async def create_riddle(self, data: dict[str, Any] | None) -> Riddle:
        riddle = Riddle(**validate_riddle_data(data))
        await self.riddles.insert(riddle)
        logger.info(f"Riddle created: {riddle.id}")
        return riddle
    
    async def update_riddle(self, riddle_id: str, data: dict[str, Any] | None) -> Riddle:
        updates = validate_riddle_data(data, partial=True)
        if "level" in updates:
            updates["level"] = updates["level"].value
        
        riddle = await self.riddles.update(riddle_id, updates)
        if riddle is None:
            raise NotFoundError("Riddle not found")
        return riddle
    
    async def delete_riddle(self, riddle_id: str) -> dict[str, str]:
        if not await self.riddles.delete(riddle_id):
            raise NotFoundError("Riddle not found")
        logger.info(f"Riddle deleted: {riddle_id}")
        return {"deleted_id": riddle_id}
    
    async def load_initial_riddles(self) -> int:
        """Insert the bundled riddles whose question is not stored yet."""
        known = await self.riddles.questions()
        inserted = 0
        for entry in load_riddle_file(self.seed_path):
            cleaned = validate_riddle_data(entry)
            if cleaned["question"] in known:
                continue
            await self.riddles.insert(Riddle(**cleaned))
            known.add(cleaned["question"])
            inserted += 1
        
        logger.info(f"Loaded {inserted} initial riddles from {self.seed_path}")
        return inserted
