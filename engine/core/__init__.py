"""
Core engine module.

Exports:
- Game, GameConfig: Main game class and configuration
- Scene, SceneManager: Scene management
- Component: Validated data model base
- EventBus, Event, EngineEvent, AudioEvent: Event system
- Action: Input actions
"""

from engine.core.game import Game, GameConfig
from engine.core.scene import Scene, SceneManager
from engine.core.component import Component
from engine.core.events import EventBus, Event, EngineEvent, AudioEvent
from engine.core.actions import Action

__all__ = [
    # Game
    "Game",
    "GameConfig",
    # Scene
    "Scene",
    "SceneManager",
    # Data
    "Component",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "AudioEvent",
    # Input
    "Action",
]
