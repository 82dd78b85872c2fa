"""
Battle scene - hosts one BattleSystem inside the engine's scene stack.

When a battle ends the scene waits a moment for the last animations, then
either switches to a fresh battle one level higher (victory) or ends the
run (defeat).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pygame

from engine.core.actions import Action
from engine.core.scene import Scene
from dicebattle.config import BattleConfig
from dicebattle.dice import PlayerDice
from dicebattle.state import CombatState
from dicebattle.system import BattleOutcome, BattleSystem

if TYPE_CHECKING:
    from engine.core.game import Game
    from dicebattle.hud import BattleHud

logger = logging.getLogger(__name__)

END_OF_BATTLE_FRAMES = 120


class BattleScene(Scene):
    """One battle at one level."""

    def __init__(
        self,
        game: Game,
        config: BattleConfig,
        player_dice: PlayerDice,
        level: int,
        hud: BattleHud | None = None,
    ):
        super().__init__(game)
        self.config = config
        self.player_dice = player_dice
        self.level = level
        self.hud = hud

        self.state = CombatState.new(
            player_dice,
            current_level=level,
            seed=config.seed_for_level(level),
            player_health=config.player_health,
            enemy_health=config.enemy_health,
        )
        self.battle = BattleSystem(
            self.state,
            events=game.event_bus,
            input_handler=game.input,
            sfx=game.sfx,
        )
        self._frames_since_end = 0

    def update(self, dt: float) -> None:
        if self.game.input.is_action_just_pressed(Action.QUIT):
            logger.info("Quit requested")
            self.game.quit()
            return

        self.battle.update()

        if self.battle.is_active:
            return

        self._frames_since_end += 1
        if self._frames_since_end < END_OF_BATTLE_FRAMES:
            return

        if self.battle.outcome == BattleOutcome.VICTORY:
            self.game.scene_manager.switch(
                BattleScene(self.game, self.config, self.player_dice, self.level + 1, self.hud)
            )
        else:
            self.game.scene_manager.pop()

    def render(self, surface: pygame.Surface, alpha: float) -> None:
        if self.hud:
            self.hud.draw(surface, self.battle)
