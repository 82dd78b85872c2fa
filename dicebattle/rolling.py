"""
Rolling dice state machine.

Each die in battle is either rolling (a flickering preview counting down)
or locked (settled on a face). A locked Malfunction carries a cooldown
during which the die can't be rerolled and contributes nothing.

Transitions:
    Rolling --(timer hits 0)--> Locked
    Locked  --(reroll)-------> Rolling
"""

from __future__ import annotations

import random
from typing import Iterator, Optional, Union

from pydantic import Field, model_validator

from engine.core.component import Component
from dicebattle.dice import Die, Face, PlayerDice

# 5 seconds at 60Hz
MALFUNCTION_COOLDOWN_FRAMES = 5 * 60
ROLL_TIME_FRAMES_ALL = 2 * 60
ROLL_TIME_FRAMES_ONE = 60 // 8


class RollingDie(Component):
    """A die still rolling; preview_face is cosmetic."""
    remaining_frames: int = Field(ge=0)
    preview_face: Face

    def tick(self, die: Die, rng: random.Random) -> Optional[LockedDie]:
        """
        Advance one frame.

        Returns:
            The settled state once the timer has run out, else None.
        """
        if self.remaining_frames == 0:
            return LockedDie.settled(die.roll(rng))

        if self.remaining_frames % 2 == 0:
            self.preview_face = die.roll(rng)
        self.remaining_frames -= 1
        return None


class LockedDie(Component):
    """A die settled on a face."""
    face: Face
    malfunction_cooldown: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _cooldown_only_on_malfunction(self) -> LockedDie:
        if self.malfunction_cooldown > 0 and self.face != Face.MALFUNCTION:
            raise ValueError(
                f"{self.face.value} die cannot carry a malfunction cooldown "
                f"({self.malfunction_cooldown})"
            )
        return self

    @classmethod
    def settled(cls, face: Face) -> LockedDie:
        """State for a die that just landed on face."""
        cooldown = MALFUNCTION_COOLDOWN_FRAMES if face == Face.MALFUNCTION else 0
        return cls(face=face, malfunction_cooldown=cooldown)

    @classmethod
    def malfunctioning(cls) -> LockedDie:
        return cls(face=Face.MALFUNCTION, malfunction_cooldown=MALFUNCTION_COOLDOWN_FRAMES)

    @property
    def is_malfunctioning(self) -> bool:
        """True while the malfunction lockout is running."""
        return self.face == Face.MALFUNCTION and self.malfunction_cooldown > 0

    def tick(self) -> None:
        if self.malfunction_cooldown > 0:
            self.malfunction_cooldown -= 1

    def can_reroll(self) -> bool:
        return self.face != Face.MALFUNCTION or self.malfunction_cooldown == 0

    def cooldown(self) -> Optional[int]:
        """Remaining lockout, or None when there is nothing to show."""
        return self.malfunction_cooldown if self.is_malfunctioning else None


DieState = Union[RollingDie, LockedDie]


class RolledDice:
    """Runtime state for every die in play, index-aligned with PlayerDice."""

    def __init__(self, states: list[DieState]):
        self.states = states

    @classmethod
    def start(
        cls,
        player_dice: PlayerDice,
        rng: random.Random,
        frames: int = ROLL_TIME_FRAMES_ALL,
    ) -> RolledDice:
        """All dice begin rolling."""
        return cls([
            RollingDie(remaining_frames=frames, preview_face=die.roll(rng))
            for die in player_dice
        ])

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[DieState]:
        return iter(self.states)

    def __getitem__(self, index: int) -> DieState:
        return self.states[index]

    def __setitem__(self, index: int, state: DieState) -> None:
        self.states[index] = state

    def update(self, player_dice: PlayerDice, rng: random.Random) -> None:
        """Advance every die by one frame."""
        for i, (state, die) in enumerate(zip(self.states, player_dice)):
            if isinstance(state, RollingDie):
                settled = state.tick(die, rng)
                if settled is not None:
                    self.states[i] = settled
            else:
                state.tick()

    def roll_die(self, index: int, die: Die, rng: random.Random, frames: int) -> bool:
        """
        Start rolling a locked die, if its lockout allows it.

        Returns:
            True if the die started rolling
        """
        state = self.states[index]
        if not isinstance(state, LockedDie) or not state.can_reroll():
            return False

        self.states[index] = RollingDie(remaining_frames=frames, preview_face=die.roll(rng))
        return True

    def locked(self) -> Iterator[tuple[int, LockedDie]]:
        """Yield (index, state) for every locked die."""
        for i, state in enumerate(self.states):
            if isinstance(state, LockedDie):
                yield i, state

    def faces_for_accepting(self) -> Iterator[Face]:
        """Locked faces that count towards a commit (malfunctions never do)."""
        for _, state in self.locked():
            if state.face != Face.MALFUNCTION:
                yield state.face

    def faces_to_render(self) -> Iterator[tuple[Face, Optional[float]]]:
        """
        Per die (face, cooldown fraction) for display.

        The fraction is remaining lockout over the full lockout and is only
        present for a running malfunction.
        """
        for state in self.states:
            if isinstance(state, RollingDie):
                yield state.preview_face, None
            else:
                cooldown = state.cooldown()
                fraction = None if cooldown is None else cooldown / MALFUNCTION_COOLDOWN_FRAMES
                yield state.face, fraction

    def check_invariants(self) -> None:
        """Re-run model validation on every state; raises on a broken die."""
        for state in self.states:
            type(state).model_validate(state.model_dump())
