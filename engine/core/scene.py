"""
Scene management.

Scenes are distinct game states (battle, results, ...). The SceneManager
keeps them on a stack:
- push: put a new scene on top
- pop: remove the top scene
- switch: replace the top scene

Stack operations are deferred to the start of the next update so a scene
can safely replace itself from inside its own update().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import pygame

from engine.core.events import EngineEvent

if TYPE_CHECKING:
    from engine.core.game import Game


class Scene(ABC):
    """
    Abstract base class for game scenes.

    Lifecycle:
        1. __init__: scene is created
        2. on_enter: scene becomes the top of the stack
        3. update/render: called every frame while active
        4. on_exit: scene is removed or covered
        5. on_destroy: scene is permanently removed
    """

    def __init__(self, game: Game):
        self.game = game
        self._is_active = False

    @property
    def is_active(self) -> bool:
        return self._is_active

    def on_enter(self) -> None:
        self._is_active = True

    def on_exit(self) -> None:
        self._is_active = False

    def on_destroy(self) -> None:
        """Release scene resources. Override as needed."""
        pass

    @abstractmethod
    def update(self, dt: float) -> None:
        """
        Update scene logic.

        Args:
            dt: Delta time in seconds (always the fixed timestep)
        """

    @abstractmethod
    def render(self, surface: pygame.Surface, alpha: float) -> None:
        """
        Draw the scene.

        Args:
            surface: Target surface
            alpha: Interpolation factor (0-1) between fixed updates
        """

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a raw pygame event.

        Returns:
            True if the event was consumed
        """
        return False


class SceneManager:
    """Manages a stack of scenes; only the top scene updates and renders."""

    def __init__(self, game: Game):
        self.game = game
        self._stack: list[Scene] = []
        self._pending_operations: list[tuple[str, Any]] = []

    @property
    def current(self) -> Scene | None:
        return self._stack[-1] if self._stack else None

    @property
    def is_empty(self) -> bool:
        return not self._stack and not self._pending_operations

    def push(self, scene: Scene) -> None:
        self._pending_operations.append(("push", scene))

    def pop(self) -> None:
        self._pending_operations.append(("pop", None))

    def switch(self, scene: Scene) -> None:
        self._pending_operations.append(("switch", scene))

    def clear(self) -> None:
        self._pending_operations.append(("clear", None))

    def flush(self) -> None:
        """Apply queued stack operations now."""
        self._process_pending()

    def update(self, dt: float) -> None:
        self._process_pending()
        if self.current:
            self.current.update(dt)

    def render(self, surface: pygame.Surface, alpha: float) -> None:
        if self.current:
            self.current.render(surface, alpha)

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.current:
            self.current.handle_event(event)

    def _process_pending(self) -> None:
        while self._pending_operations:
            op, scene = self._pending_operations.pop(0)

            if op == "push":
                if self._stack:
                    self._stack[-1].on_exit()
                self._enter(scene)
                self._notify(EngineEvent.SCENE_PUSHED, scene)

            elif op == "pop":
                if self._stack:
                    self._leave(self._stack.pop())
                    if self._stack:
                        self._stack[-1].on_enter()
                    self._notify(EngineEvent.SCENE_POPPED, self.current)

            elif op == "switch":
                if self._stack:
                    self._leave(self._stack.pop())
                self._enter(scene)
                self._notify(EngineEvent.SCENE_SWITCHED, scene)

            elif op == "clear":
                while self._stack:
                    self._leave(self._stack.pop())

    def _enter(self, scene: Scene) -> None:
        self._stack.append(scene)
        scene.on_enter()

    def _leave(self, scene: Scene) -> None:
        scene.on_exit()
        scene.on_destroy()

    def _notify(self, event_type: EngineEvent, scene: Scene | None) -> None:
        event_bus = getattr(self.game, "event_bus", None)
        if event_bus:
            event_bus.publish(event_type, scene=scene)
