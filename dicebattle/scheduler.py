"""
Enemy attack scheduler.

The enemy has two attack slots. An occupied slot counts its cooldown
down and fires when it reaches zero; an empty slot rolls each frame for a
chance to spawn a new attack. Higher levels spawn more often and hit
harder.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, NamedTuple, Optional

from dicebattle.events import DisplayEvent

if TYPE_CHECKING:
    from dicebattle.state import CombatState, EnemyState, PlayerState

logger = logging.getLogger(__name__)

ATTACK_SLOTS = 2

# Spawn chance per empty slot per frame is current_level * 2 / 1024
SPAWN_ROLL_RANGE = 1024
SPAWN_WEIGHT_PER_LEVEL = 2

MIN_ATTACK_COOLDOWN = 128
MAX_ATTACK_COOLDOWN = 247


class AttackKind(Enum):
    """What an enemy attack does when it fires."""
    SHOOT = auto()
    SHIELD = auto()
    HEAL = auto()


class AttackDisplay(NamedTuple):
    """Render view of one occupied attack slot."""
    kind: AttackKind
    cooldown_fraction: float
    value: int


@dataclass(frozen=True)
class EnemyAttack:
    kind: AttackKind
    value: int

    def apply(self, player: PlayerState, enemy: EnemyState) -> Optional[DisplayEvent]:
        """
        Resolve this attack.

        Returns:
            The display event, or None when nothing visible happened
        """
        if self.kind == AttackKind.SHOOT:
            if self.value <= player.shield_count:
                # Absorbed without breaking anything
                return None
            if player.shield_count > 0:
                player.break_shield()
                return DisplayEvent.ENEMY_BREAK_SHIELD
            player.take_damage(self.value)
            return DisplayEvent.ENEMY_SHOOT_PLAYER

        if self.kind == AttackKind.SHIELD:
            if enemy.raise_shield(self.value):
                return DisplayEvent.ENEMY_NEW_SHIELD
            return None

        enemy.heal(self.value)
        return DisplayEvent.ENEMY_HEAL


@dataclass
class EnemyAttackState:
    """An attack waiting in a slot."""
    attack: EnemyAttack
    cooldown: int
    max_cooldown: int

    @property
    def kind(self) -> AttackKind:
        return self.attack.kind

    @property
    def cooldown_fraction(self) -> float:
        """Remaining wait as a fraction of the original wait, at most 1."""
        if self.max_cooldown <= 0:
            return 0.0
        return min(1.0, self.cooldown / self.max_cooldown)

    def delay(self, frames: int) -> None:
        """Push the attack back; disruption never cancels it."""
        self.cooldown += frames

    def tick(self, player: PlayerState, enemy: EnemyState) -> tuple[Optional[DisplayEvent], bool]:
        """
        Advance one frame.

        Returns:
            (display event, fired). When fired is True the slot must be freed.
        """
        if self.cooldown == 0:
            return self.attack.apply(player, enemy), True

        self.cooldown -= 1
        return None, False

    def display(self) -> AttackDisplay:
        return AttackDisplay(self.kind, self.cooldown_fraction, self.attack.value)


def generate_attack(current_level: int, rng: random.Random) -> Optional[EnemyAttackState]:
    """
    Maybe spawn an attack for an empty slot.

    Kinds are weighted Shoot 4 : Shield 5 : Heal 1.
    """
    if rng.randrange(SPAWN_ROLL_RANGE) >= current_level * SPAWN_WEIGHT_PER_LEVEL:
        return None

    cooldown = rng.randint(MIN_ATTACK_COOLDOWN, MAX_ATTACK_COOLDOWN)
    return EnemyAttackState(
        attack=generate_enemy_attack(current_level, rng),
        cooldown=cooldown,
        max_cooldown=cooldown,
    )


def generate_enemy_attack(current_level: int, rng: random.Random) -> EnemyAttack:
    attack_id = rng.randrange(10)

    if attack_id < 4:
        return EnemyAttack(AttackKind.SHOOT, rng.randrange((current_level + 2) // 3) + 1)
    if attack_id < 9:
        return EnemyAttack(AttackKind.SHIELD, rng.randrange((current_level + 4) // 5) + 1)
    return EnemyAttack(AttackKind.HEAL, rng.randrange((current_level + 1) // 2))


def update_attacks(state: CombatState) -> list[DisplayEvent]:
    """
    Advance both attack slots by one frame.

    A slot freed this frame stays empty until the next frame.
    """
    events = []

    for slot, attack in enumerate(state.attacks):
        if attack is not None:
            event, fired = attack.tick(state.player, state.enemy)
            if fired:
                state.attacks[slot] = None
                logger.debug(f"Slot {slot} fired {attack.kind.name}({attack.attack.value})")
                if event is not None:
                    events.append(event)
        else:
            generated = generate_attack(state.current_level, state.rng)
            if generated is not None:
                state.attacks[slot] = generated
                logger.debug(
                    f"Slot {slot} scheduled {generated.kind.name}({generated.attack.value}) "
                    f"in {generated.cooldown} frames"
                )

    return events


def disrupt_attacks(state: CombatState, frames: int) -> None:
    """Delay every scheduled attack by frames; empty slots are untouched."""
    for attack in state.active_attacks():
        attack.delay(frames)
