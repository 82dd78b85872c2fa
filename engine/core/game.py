"""
Core Game class with a fixed timestep game loop.

The Game owns:
- The pygame window and clock
- A fixed timestep update loop (deterministic simulation ticks)
- A variable render pass
- The scene stack, event bus, input handler and sound effects
"""

from __future__ import annotations

import logging
import time

import pygame

from engine.audio.sfx import SfxPlayer
from engine.core.actions import Action
from engine.core.events import EventBus, EngineEvent
from engine.core.scene import SceneManager
from engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class GameConfig:
    """Configuration for the game engine."""

    def __init__(
        self,
        title: str = "Dice Battle",
        width: int = 480,
        height: int = 320,
        target_fps: int = 60,
        fixed_timestep: float = 1 / 60,
        max_frame_skip: int = 5,
        vsync: bool = True,
        fullscreen: bool = False,
        sfx_path: str = "assets/sfx",
    ):
        self.title = title
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.fixed_timestep = fixed_timestep
        self.max_frame_skip = max_frame_skip
        self.vsync = vsync
        self.fullscreen = fullscreen
        self.sfx_path = sfx_path


class Game:
    """
    Main game class.

    Logic runs in fixed ticks of config.fixed_timestep; one tick is one
    simulation frame. Rendering happens once per loop iteration.

    Usage:
        game = Game(GameConfig(title="Dice Battle"))
        game.scene_manager.push(BattleScene(game, ...))
        game.run()
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self._running = False
        self._paused = False

        pygame.init()

        flags = pygame.SCALED
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags,
            vsync=int(self.config.vsync),
        )
        pygame.display.set_caption(self.config.title)

        # Core services
        self.event_bus = EventBus()
        self.input = InputHandler(self.event_bus)
        self.sfx = SfxPlayer(self.config.sfx_path, self.event_bus)
        self.sfx.init()
        self.scene_manager = SceneManager(self)

        # Timing
        self._clock = pygame.time.Clock()
        self._accumulator = 0.0
        self._current_time = time.perf_counter()
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        """Number of fixed ticks run so far."""
        return self._frame_count

    def run(self) -> None:
        """Run until quit() is called or the scene stack empties."""
        self._running = True
        self._current_time = time.perf_counter()
        self.event_bus.publish(EngineEvent.GAME_START)
        logger.info(f"Starting main loop at {1 / self.config.fixed_timestep:.0f} ticks/s")

        while self._running:
            new_time = time.perf_counter()
            frame_time = min(new_time - self._current_time, 0.25)
            self._current_time = new_time
            self._accumulator += frame_time

            self._process_events()

            updates = 0
            while self._accumulator >= self.config.fixed_timestep:
                self._fixed_update(self.config.fixed_timestep)
                self._accumulator -= self.config.fixed_timestep
                updates += 1

                # Prevent spiral of death
                if updates >= self.config.max_frame_skip:
                    self._accumulator = 0
                    break

            if self.scene_manager.is_empty:
                self.quit()

            self._render(self._accumulator / self.config.fixed_timestep)
            self._clock.tick(self.config.target_fps)

        self._shutdown()

    def quit(self) -> None:
        self._running = False

    def toggle_pause(self) -> None:
        self._paused = not self._paused
        self.event_bus.publish(EngineEvent.GAME_PAUSE if self._paused else EngineEvent.GAME_RESUME)

    def _process_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            else:
                self.input.process_event(event)
                self.scene_manager.handle_event(event)

    def _fixed_update(self, dt: float) -> None:
        self.input.update()
        if self.input.is_action_just_pressed(Action.PAUSE):
            self.toggle_pause()
        if self._paused:
            return
        self.scene_manager.update(dt)
        self._frame_count += 1

    def _render(self, alpha: float) -> None:
        self.screen.fill((0, 0, 0))
        self.scene_manager.render(self.screen, alpha)
        pygame.display.flip()

    def _shutdown(self) -> None:
        self.event_bus.publish(EngineEvent.GAME_QUIT)
        self.scene_manager.clear()
        self.scene_manager.flush()
        self.sfx.quit()
        pygame.quit()
        logger.info(f"Shut down after {self._frame_count} ticks")
