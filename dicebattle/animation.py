"""
Animation sequencer - turns display events into short frame-driven effects.

Each display event starts one independent animation:
- shots: a projectile crossing the screen
- shield breaks: a projectile, then the shield dissolving
- new shields: the shield fading in
- heals: a pulse on the healed ship

Animations only read combat state (to pick a shield slot, say) and never
write it. Any number can run at once; none of them hold up the battle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Optional

from dicebattle.events import DisplayEvent

if TYPE_CHECKING:
    from engine.core.events import EventBus
    from dicebattle.state import CombatState

PROJECTILE_SPEED = 2
PLAYER_PROJECTILE_START = 64
PLAYER_PROJECTILE_END = 190
ENEMY_PROJECTILE_START = 176
ENEMY_PROJECTILE_END = 48

SHIELD_DISSOLVE_FRAMES = 12
SHIELD_DISSOLVE_STEPS = 6
SHIELD_APPEAR_STEPS = 6
HEAL_PULSE_FRAMES = 30


class AnimationEvent(Enum):
    """Sequencer events."""
    ANIMATION_STARTED = auto()    # event, animation
    ANIMATION_COMPLETED = auto()  # event, animation


class Side(Enum):
    """Which ship an animation is drawn on or fired from."""
    PLAYER = auto()
    ENEMY = auto()

    @property
    def opponent(self) -> Side:
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class Animation(ABC):
    """A finite effect advanced once per frame."""

    event: DisplayEvent

    @abstractmethod
    def update(self) -> None:
        """Advance one frame."""

    @property
    @abstractmethod
    def is_complete(self) -> bool:
        """True once the animation can be discarded."""


@dataclass
class ProjectileAnimation(Animation):
    """
    A shot travelling between the ships.

    Player shots move right from x=64 and land past x=190; enemy shots
    move left from x=176 and land past x=48.
    """
    event: DisplayEvent
    shooter: Side
    x: int = field(init=False)

    def __post_init__(self):
        self.x = PLAYER_PROJECTILE_START if self.shooter is Side.PLAYER else ENEMY_PROJECTILE_START

    @property
    def target(self) -> int:
        return PLAYER_PROJECTILE_END if self.shooter is Side.PLAYER else ENEMY_PROJECTILE_END

    @property
    def is_complete(self) -> bool:
        if self.shooter is Side.PLAYER:
            return self.x >= self.target
        return self.x <= self.target

    def update(self) -> None:
        if self.is_complete:
            return
        self.x += PROJECTILE_SPEED if self.shooter is Side.PLAYER else -PROJECTILE_SPEED


@dataclass
class ShieldBreakAnimation(Animation):
    """A projectile followed by the target's front shield dissolving."""
    event: DisplayEvent
    shooter: Side
    projectile: ProjectileAnimation = field(init=False)
    dissolve_frame: int = 0

    def __post_init__(self):
        self.projectile = ProjectileAnimation(self.event, self.shooter)

    @property
    def target_side(self) -> Side:
        return self.shooter.opponent

    @property
    def is_dissolving(self) -> bool:
        return self.projectile.is_complete

    @property
    def dissolve_step(self) -> int:
        """Visual decay step, 0 (intact) to 5 (almost gone)."""
        steps_per_frame = SHIELD_DISSOLVE_FRAMES // SHIELD_DISSOLVE_STEPS
        return min(self.dissolve_frame // steps_per_frame, SHIELD_DISSOLVE_STEPS - 1)

    @property
    def is_complete(self) -> bool:
        return self.dissolve_frame >= SHIELD_DISSOLVE_FRAMES

    def update(self) -> None:
        if not self.projectile.is_complete:
            self.projectile.update()
        elif not self.is_complete:
            self.dissolve_frame += 1


@dataclass
class ShieldAppearAnimation(Animation):
    """A new shield fading in at a given slot."""
    event: DisplayEvent
    side: Side
    slot: int
    steps_left: int = SHIELD_APPEAR_STEPS

    @property
    def is_complete(self) -> bool:
        return self.steps_left == 0

    def update(self) -> None:
        if self.steps_left > 0:
            self.steps_left -= 1


@dataclass
class HealPulseAnimation(Animation):
    """A short glow on the healed ship."""
    event: DisplayEvent
    side: Side
    frame: int = 0

    @property
    def is_complete(self) -> bool:
        return self.frame >= HEAL_PULSE_FRAMES

    def update(self) -> None:
        if not self.is_complete:
            self.frame += 1


def animation_for(event: DisplayEvent, state: CombatState) -> Animation:
    """Build the animation for a display event."""
    if event == DisplayEvent.PLAYER_SHOOT_ENEMY:
        return ProjectileAnimation(event, Side.PLAYER)
    if event == DisplayEvent.ENEMY_SHOOT_PLAYER:
        return ProjectileAnimation(event, Side.ENEMY)
    if event == DisplayEvent.PLAYER_BREAK_SHIELD:
        return ShieldBreakAnimation(event, Side.PLAYER)
    if event == DisplayEvent.ENEMY_BREAK_SHIELD:
        return ShieldBreakAnimation(event, Side.ENEMY)
    if event == DisplayEvent.PLAYER_NEW_SHIELD:
        return ShieldAppearAnimation(event, Side.PLAYER, max(0, state.player.shield_count - 1))
    if event == DisplayEvent.ENEMY_NEW_SHIELD:
        return ShieldAppearAnimation(event, Side.ENEMY, max(0, state.enemy.shield_count - 1))
    if event == DisplayEvent.ENEMY_HEAL:
        return HealPulseAnimation(event, Side.ENEMY)
    raise ValueError(f"No animation for {event}")


class AnimationSequencer:
    """
    Runs every in-flight animation.

    Usage:
        sequencer.extend(events, state)   # when events arrive
        sequencer.update()                # once per frame
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._event_bus = event_bus
        self._active: list[Animation] = []

    @property
    def active(self) -> list[Animation]:
        """Animations still running, oldest first."""
        return list(self._active)

    @property
    def is_idle(self) -> bool:
        return not self._active

    def add(self, event: DisplayEvent, state: CombatState) -> Animation:
        animation = animation_for(event, state)
        self._active.append(animation)
        if self._event_bus:
            self._event_bus.publish(
                AnimationEvent.ANIMATION_STARTED, event=event, animation=animation
            )
        return animation

    def extend(self, events: Iterable[DisplayEvent], state: CombatState) -> None:
        for event in events:
            self.add(event, state)

    def update(self) -> list[Animation]:
        """
        Advance all animations one frame and drop the finished ones.

        Returns:
            Animations that completed this frame
        """
        finished = []
        for animation in self._active:
            animation.update()
            if animation.is_complete:
                finished.append(animation)

        if finished:
            self._active = [a for a in self._active if not a.is_complete]
            if self._event_bus:
                for animation in finished:
                    self._event_bus.publish(
                        AnimationEvent.ANIMATION_COMPLETED,
                        event=animation.event,
                        animation=animation,
                    )

        return finished

    def of_type(self, animation_type: type[Animation]) -> list[Animation]:
        return [a for a in self._active if isinstance(a, animation_type)]

    def clear(self) -> None:
        self._active.clear()
