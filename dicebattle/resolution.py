"""
Roll resolution - what happens when the player commits the dice.

Locked, working faces are tallied and scored. Stacking one face pays off
triangularly (n faces are worth n(n+1)/2), so one big commit beats several
small ones.

Order of effects:
    1. tally (double/triple shots count as 2/3 shots)
    2. shield
    3. shoot (bypass lowers the enemy shield first)
    4. disrupt (delays enemy attacks)
    5. malfunction cascade
    6. reroll everything that may be rerolled
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Iterable

from dicebattle.dice import Face
from dicebattle.events import DisplayEvent
from dicebattle.rolling import ROLL_TIME_FRAMES_ALL, LockedDie
from dicebattle.scheduler import disrupt_attacks

if TYPE_CHECKING:
    from dicebattle.state import CombatState

logger = logging.getLogger(__name__)

DISRUPT_FRAMES_PER_POINT = 60


def triangular(count: int) -> int:
    """n(n+1)/2"""
    return count * (count + 1) // 2


def tally_faces(faces: Iterable[Face]) -> Counter[Face]:
    """
    Count faces, folding multi-shot faces into Shoot.

    DoubleShot and TripleShot only add to the Shoot count; they never
    appear as keys of their own.
    """
    counts: Counter[Face] = Counter()
    for face in faces:
        if face.shot_count:
            counts[Face.SHOOT] += face.shot_count
        else:
            counts[face] += 1
    return counts


def accept_rolls(state: CombatState) -> list[DisplayEvent]:
    """
    Commit the currently locked dice.

    Returns:
        Display events in the order they happened
    """
    events: list[DisplayEvent] = []

    accepted = list(state.dice.faces_for_accepting())
    counts = tally_faces(accepted)

    # Shield
    if state.player.raise_shield(counts[Face.SHIELD]):
        events.append(DisplayEvent.PLAYER_NEW_SHIELD)

    # Shoot
    shots = counts[Face.SHOOT]
    shoot_power = triangular(shots)
    effective_shield = max(0, state.enemy.shield_count - counts[Face.BYPASS])

    if shoot_power >= effective_shield:
        state.enemy.break_shield()
        if effective_shield > 0:
            # The shield soaks this volley
            events.append(DisplayEvent.PLAYER_BREAK_SHIELD)
        else:
            state.enemy.take_damage(shoot_power)
            events.append(DisplayEvent.PLAYER_SHOOT_ENEMY)

    # Disrupt
    disrupt_power = triangular(counts[Face.DISRUPT])
    if disrupt_power:
        disrupt_attacks(state, disrupt_power * DISRUPT_FRAMES_PER_POINT)

    _apply_malfunctions(state)

    # Uses the manual reroll rule, so an expired malfunction rejoins the pool
    for i in range(state.num_dice):
        state.roll_die(i, ROLL_TIME_FRAMES_ALL)

    logger.debug(
        f"Accepted {[face.value for face in accepted]}: shoot={shoot_power} "
        f"vs shield={effective_shield}, disrupt={disrupt_power}, events={[e.name for e in events]}"
    )
    return events


def _apply_malfunctions(state: CombatState) -> None:
    """Double shots burn out their own die; any triple shot burns out every locked die."""
    malfunction_all = False

    for i, die in list(state.dice.locked()):
        if die.face == Face.DOUBLE_SHOT:
            state.dice[i] = LockedDie.malfunctioning()
        elif die.face == Face.TRIPLE_SHOT:
            malfunction_all = True

    if malfunction_all:
        for i, _ in list(state.dice.locked()):
            state.dice[i] = LockedDie.malfunctioning()
