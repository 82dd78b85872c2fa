"""
Input action definitions.

Actions abstract raw input (keys, buttons) into semantic actions.
Battle code asks for Actions, never for raw keys, so bindings can be
changed without touching game logic.

Usage:
    if input.is_action_just_pressed(Action.COMMIT):
        ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic input actions."""

    # Die selection
    SELECT_PREV = auto()
    SELECT_NEXT = auto()

    # Dice commands
    REROLL = auto()
    COMMIT = auto()

    # System
    PAUSE = auto()
    QUIT = auto()


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.SELECT_PREV: [pygame.K_LEFT, pygame.K_a],
    Action.SELECT_NEXT: [pygame.K_RIGHT, pygame.K_d],
    Action.REROLL: [pygame.K_z, pygame.K_SPACE],
    Action.COMMIT: [pygame.K_RETURN],
    Action.PAUSE: [pygame.K_p],
    Action.QUIT: [pygame.K_ESCAPE],
}

# Gamepad button bindings (SDL controller layout)
DEFAULT_GAMEPAD_BINDINGS: dict[Action, list[int]] = {
    Action.REROLL: [0],   # A button
    Action.COMMIT: [7],   # Start
    Action.QUIT: [6],     # Back
}

# D-pad bindings (hat)
DEFAULT_GAMEPAD_HAT_BINDINGS: dict[tuple[int, int], Action] = {
    (-1, 0): Action.SELECT_PREV,
    (1, 0): Action.SELECT_NEXT,
}
