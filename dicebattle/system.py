"""
Battle system - the per-frame controller for one battle.

Frame order:
    1. player input (select / reroll / queue commit)
    2. dice update
    3. enemy attack slots, then any queued commit (expiry is always seen
       before a same-frame commit)
    4. display events -> animation sequencer and event bus
    5. animation update
    6. victory / defeat check
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional

from engine.core.actions import Action
from engine.core.events import EventBus
from dicebattle.animation import AnimationSequencer
from dicebattle.events import BattleEvent, DisplayEvent
from dicebattle.resolution import accept_rolls
from dicebattle.state import CombatState

if TYPE_CHECKING:
    from engine.audio.sfx import SfxPlayer
    from engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class BattleOutcome(Enum):
    """State of the battle."""
    ONGOING = auto()
    VICTORY = auto()
    DEFEAT = auto()


class BattleSystem:
    """
    Drives a CombatState one frame at a time.

    Input and sound are optional so the system can run headless (tests,
    replays). Without an input handler, call select(), reroll_selected()
    and commit() directly between update() calls.
    """

    def __init__(
        self,
        state: CombatState,
        events: Optional[EventBus] = None,
        input_handler: Optional[InputHandler] = None,
        sfx: Optional[SfxPlayer] = None,
        sequencer: Optional[AnimationSequencer] = None,
    ):
        self.state = state
        self.events = events
        self.input = input_handler
        self.sfx = sfx
        self.sequencer = sequencer or AnimationSequencer(events)

        self.outcome = BattleOutcome.ONGOING
        self._selected_die = 0
        self._frame = 0
        self._pending_commit = False

        self._on_battle_end: Optional[Callable[[BattleOutcome], None]] = None

        self._publish(
            BattleEvent.BATTLE_STARTED,
            level=state.current_level,
            num_dice=state.num_dice,
        )
        logger.info(
            f"Battle started at level {state.current_level} with {state.num_dice} dice"
        )

    @property
    def is_active(self) -> bool:
        return self.outcome == BattleOutcome.ONGOING

    @property
    def selected_die(self) -> int:
        return self._selected_die

    @property
    def frame(self) -> int:
        """Frames simulated so far."""
        return self._frame

    def on_battle_end(self, callback: Callable[[BattleOutcome], None]) -> None:
        """Set callback for battle end."""
        self._on_battle_end = callback

    # Player commands

    def select(self, step: int) -> int:
        """Move the die cursor, wrapping at both ends."""
        self._selected_die = (self._selected_die + step) % self.state.num_dice
        return self._selected_die

    def reroll_selected(self) -> bool:
        """Reroll the selected die if it is locked and not locked out."""
        if not self.is_active:
            return False

        if self.sfx:
            self.sfx.roll()

        rerolled = self.state.roll_die(self._selected_die)
        if rerolled:
            self._publish(BattleEvent.DIE_REROLLED, die_index=self._selected_die)
        return rerolled

    def commit(self) -> None:
        """
        Queue a commit.

        It resolves inside update(), after that frame's enemy attacks.
        """
        if not self.is_active:
            return
        self._pending_commit = True

    # Frame update

    def update(self) -> list[DisplayEvent]:
        """
        Run one frame.

        Returns:
            Display events produced this frame, in order
        """
        if not self.is_active:
            # Let the last animations play out
            self.sequencer.update()
            return []

        self._frame += 1

        if self.input:
            self._handle_input()

        previous_slots = list(self.state.attacks)
        display_events = self.state.update()
        self._report_new_attacks(previous_slots)

        if self._pending_commit:
            self._pending_commit = False
            if self.sfx:
                self.sfx.roll_multi()
            accepted = accept_rolls(self.state)
            self._publish(BattleEvent.ROLL_ACCEPTED, events=list(accepted))
            display_events.extend(accepted)

        for event in display_events:
            self.sequencer.add(event, self.state)
            self._publish(BattleEvent.DISPLAY_EVENT, kind=event)

        self.sequencer.update()
        self._check_battle_end()

        return display_events

    def _handle_input(self) -> None:
        step = self.input.get_selection_step()
        if step:
            self.select(step)

        if self.input.is_action_just_pressed(Action.REROLL):
            self.reroll_selected()

        if self.input.is_action_just_pressed(Action.COMMIT):
            self.commit()

    def _report_new_attacks(self, previous_slots: list) -> None:
        for slot, attack in enumerate(self.state.attacks):
            if attack is not None and attack is not previous_slots[slot]:
                self._publish(
                    BattleEvent.ATTACK_SCHEDULED,
                    slot=slot,
                    kind=attack.kind,
                    value=attack.attack.value,
                    cooldown=attack.cooldown,
                )

    def _check_battle_end(self) -> bool:
        """Check if battle should end."""
        if self.state.player.is_defeated:
            self.outcome = BattleOutcome.DEFEAT
        elif self.state.enemy.is_defeated:
            self.outcome = BattleOutcome.VICTORY
        else:
            return False

        logger.info(
            f"Battle ended: {self.outcome.name} at level {self.state.current_level} "
            f"after {self._frame} frames"
        )
        self._publish(
            BattleEvent.BATTLE_ENDED,
            outcome=self.outcome,
            level=self.state.current_level,
            frames=self._frame,
        )
        if self._on_battle_end:
            self._on_battle_end(self.outcome)
        return True

    def _publish(self, event_type: BattleEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
