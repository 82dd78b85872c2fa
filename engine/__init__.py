"""
Dice Battle engine layer

The generic pieces a battle runs on: fixed-timestep game loop, scene stack,
typed event bus, input mapping, sound effects and the JSON data loader.

Quick Start:
    from engine.core import Game, GameConfig, Scene

    class MyScene(Scene):
        def update(self, dt: float) -> None:
            pass

        def render(self, surface, alpha: float) -> None:
            pass

    game = Game(GameConfig(title="My Game"))
    game.scene_manager.push(MyScene(game))
    game.run()
"""

__version__ = "0.1.0"

from engine.core import (
    Game,
    GameConfig,
    Scene,
    SceneManager,
    Component,
    EventBus,
    Event,
    EngineEvent,
    Action,
)

from engine.input import InputHandler

__all__ = [
    # Core
    "Game",
    "GameConfig",
    "Scene",
    "SceneManager",
    "Component",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    # Input
    "InputHandler",
    "Action",
]
