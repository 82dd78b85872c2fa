"""
Battle configuration and dice loadouts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from engine.resources.database import Database
from dicebattle.dice import PlayerDice

logger = logging.getLogger(__name__)


class BattleConfig(BaseModel):
    """
    Starting values for a run of battles.

    Attributes:
        player_health: Player max (and starting) health
        enemy_health: Enemy max (and starting) health
        starting_level: Level of the first battle
        seed: Seed for the first battle; later battles derive from it
        loadout: Loadout id to look up in the data directory
        data_path: Root of the data directory
    """
    player_health: int = Field(default=120, ge=1)
    enemy_health: int = Field(default=50, ge=1)
    starting_level: int = Field(default=1, ge=1)
    seed: Optional[int] = None
    loadout: str = "starter"
    data_path: Path = Path("data")

    def seed_for_level(self, level: int) -> Optional[int]:
        """Per-battle seed, so each level replays the same way for a given run seed."""
        if self.seed is None:
            return None
        return self.seed * 1000 + level


def load_player_dice(config: BattleConfig, database: Database | None = None) -> PlayerDice:
    """
    Resolve the configured loadout to dice.

    Falls back to the two starter dice when the loadout can't be found.
    """
    if database is None:
        database = Database(config.data_path)
        database.load_all()

    record = database.get_loadout(config.loadout)
    if record is None:
        logger.warning(f"Loadout '{config.loadout}' not found, using starter dice")
        return PlayerDice.starter()

    logger.info(f"Using loadout '{config.loadout}' with {len(record['dice'])} dice")
    return PlayerDice.from_loadout(record)
