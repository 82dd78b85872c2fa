"""
Dice and faces.

A Die is six faces in a fixed order; rolling picks one index uniformly.
PlayerDice is the ordered collection the player brings into battle.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

FACES_PER_DIE = 6


class Face(Enum):
    """Symbol shown on a die face."""
    SHOOT = "Shoot"
    SHIELD = "Shield"
    MALFUNCTION = "Malfunction"
    HEAL = "Heal"
    BYPASS = "Bypass"
    DOUBLE_SHOT = "DoubleShot"
    TRIPLE_SHOT = "TripleShot"
    BLANK = "Blank"
    DISRUPT = "Disrupt"

    @property
    def shot_count(self) -> int:
        """How many Shoot points this face is worth when tallied."""
        return _SHOT_COUNTS.get(self, 0)


_SHOT_COUNTS = {
    Face.SHOOT: 1,
    Face.DOUBLE_SHOT: 2,
    Face.TRIPLE_SHOT: 3,
}


@dataclass(frozen=True)
class Die:
    """A six-sided die. Face index is the roll outcome."""
    faces: tuple[Face, ...]

    def __post_init__(self):
        if len(self.faces) != FACES_PER_DIE:
            raise ValueError(f"A die needs exactly {FACES_PER_DIE} faces, got {len(self.faces)}")

    @classmethod
    def from_names(cls, names: list[str]) -> Die:
        """Build a die from face names as stored in loadout files."""
        return cls(tuple(Face(name) for name in names))

    def roll(self, rng: random.Random) -> Face:
        """Pick a face uniformly at random."""
        return self.faces[rng.randrange(FACES_PER_DIE)]


BASIC_DIE = Die((
    Face.SHOOT,
    Face.SHIELD,
    Face.BLANK,
    Face.MALFUNCTION,
    Face.SHOOT,
    Face.BLANK,
))


@dataclass
class PlayerDice:
    """The dice a player owns, in display order."""
    dice: list[Die] = field(default_factory=list)

    @classmethod
    def starter(cls, count: int = 2) -> PlayerDice:
        return cls([BASIC_DIE] * count)

    @classmethod
    def from_loadout(cls, record: dict[str, Any]) -> PlayerDice:
        """Build from a validated loadout record ({"id": ..., "dice": [[...], ...]})."""
        return cls([Die.from_names(faces) for faces in record["dice"]])

    def clone(self) -> PlayerDice:
        # Die is frozen, a new list is enough
        return PlayerDice(list(self.dice))

    def __len__(self) -> int:
        return len(self.dice)

    def __iter__(self) -> Iterator[Die]:
        return iter(self.dice)

    def __getitem__(self, index: int) -> Die:
        return self.dice[index]
