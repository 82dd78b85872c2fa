"""
Combat state - the aggregate that a battle owns for its whole duration.

Every battle component receives this object and mutates it in place;
no component keeps a reference to another. Randomness comes from the
aggregate's own seeded generator so a battle can be replayed from its
seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterator, Optional

from pydantic import Field, model_validator

from engine.core.component import Component
from dicebattle.dice import Face, PlayerDice
from dicebattle.events import DisplayEvent
from dicebattle.rolling import ROLL_TIME_FRAMES_ONE, RolledDice
from dicebattle.scheduler import ATTACK_SLOTS, AttackDisplay, EnemyAttackState, update_attacks


class ActorState(Component):
    """
    Shields and health for one side of the battle.

    Attributes:
        shield_count: Shield points; an incoming shot must exceed these to land
        health: Current health, never below 0
        max_health: Health ceiling for healing
    """
    shield_count: int = Field(default=0, ge=0)
    health: int = Field(ge=0)
    max_health: int = Field(ge=1)

    @model_validator(mode="after")
    def _health_within_max(self) -> ActorState:
        if self.health > self.max_health:
            raise ValueError(f"health {self.health} exceeds max_health {self.max_health}")
        return self

    @property
    def is_defeated(self) -> bool:
        return self.health == 0

    @property
    def health_fraction(self) -> float:
        return self.health / self.max_health

    def take_damage(self, amount: int) -> int:
        """
        Lose health, saturating at 0.

        Returns:
            Health actually lost
        """
        actual = min(amount, self.health)
        self.health -= actual
        return actual

    def heal(self, amount: int) -> int:
        """
        Gain health up to max_health.

        Returns:
            Health actually gained
        """
        old = self.health
        self.health = min(self.health + amount, self.max_health)
        return self.health - old

    def raise_shield(self, amount: int) -> bool:
        """
        Set shields to amount if that is higher; shields never stack.

        Returns:
            True if the shield count went up
        """
        if amount <= self.shield_count:
            return False
        self.shield_count = amount
        return True

    def break_shield(self) -> int:
        """Drop all shields. Returns how many were lost."""
        lost = self.shield_count
        self.shield_count = 0
        return lost


class PlayerState(ActorState):
    """The player's ship."""


class EnemyState(ActorState):
    """The opposing ship."""


@dataclass
class CombatState:
    """
    Everything a battle needs between frames.

    Attributes:
        player: Player shields/health
        enemy: Enemy shields/health
        dice: Runtime state per die, index-aligned with player_dice
        player_dice: Die definitions (never modified in battle)
        attacks: Two fixed attack slots; None is an empty slot
        current_level: Drives enemy attack frequency and strength
        rng: Seeded random source for every draw in the battle
    """
    player: PlayerState
    enemy: EnemyState
    dice: RolledDice
    player_dice: PlayerDice
    attacks: list[Optional[EnemyAttackState]] = field(
        default_factory=lambda: [None] * ATTACK_SLOTS
    )
    current_level: int = 1
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def new(
        cls,
        player_dice: PlayerDice,
        current_level: int = 1,
        seed: Optional[int] = None,
        player_health: int = 120,
        enemy_health: int = 50,
    ) -> CombatState:
        """Fresh battle: full health, no shields, every die rolling."""
        rng = random.Random(seed)
        dice = player_dice.clone()
        return cls(
            player=PlayerState(health=player_health, max_health=player_health),
            enemy=EnemyState(health=enemy_health, max_health=enemy_health),
            dice=RolledDice.start(dice, rng),
            player_dice=dice,
            current_level=current_level,
            rng=rng,
        )

    @property
    def num_dice(self) -> int:
        return len(self.player_dice)

    def update(self) -> list[DisplayEvent]:
        """
        Advance dice and enemy attacks by one frame.

        Returns:
            Display events from attacks that landed this frame
        """
        self.dice.update(self.player_dice, self.rng)
        return update_attacks(self)

    def roll_die(self, die_index: int, frames: int = ROLL_TIME_FRAMES_ONE) -> bool:
        """Reroll one locked die. Returns True if it started rolling."""
        return self.dice.roll_die(die_index, self.player_dice[die_index], self.rng, frames)

    # Read-only accessors for rendering

    def faces_to_render(self) -> list[tuple[Face, Optional[float]]]:
        return list(self.dice.faces_to_render())

    def attack_displays(self) -> list[Optional[AttackDisplay]]:
        return [attack.display() if attack else None for attack in self.attacks]

    def active_attacks(self) -> Iterator[EnemyAttackState]:
        return (attack for attack in self.attacks if attack is not None)
