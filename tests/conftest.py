import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.quit'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.mixer'), \
         patch('pygame.joystick'), \
         patch('pygame.key'), \
         patch('pygame.font'), \
         patch('pygame.draw'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)
        pygame.joystick.get_count.return_value = 0

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def recorder(event_bus):
    """Collects every published event of the requested types, in order."""
    received = []

    def record(*event_types):
        for event_type in event_types:
            event_bus.subscribe(event_type, received.append, weak=False)
        return received

    return record

@pytest.fixture
def player_dice():
    """The two starter dice."""
    from dicebattle.dice import PlayerDice
    return PlayerDice.starter()

@pytest.fixture
def combat_state(player_dice):
    """Seeded level 1 battle, all dice still rolling."""
    from dicebattle.state import CombatState
    return CombatState.new(player_dice, current_level=1, seed=1234)

@pytest.fixture
def lock_dice():
    """Replace every die state with a locked face, in order."""
    from dicebattle.rolling import LockedDie

    def lock(state, *faces):
        assert len(faces) == state.num_dice
        for i, face in enumerate(faces):
            state.dice[i] = LockedDie(face=face)
        return state

    return lock

@pytest.fixture
def make_state():
    """Battle with an arbitrary number of dice for resolution tests."""
    from dicebattle.dice import BASIC_DIE, PlayerDice
    from dicebattle.state import CombatState

    def make(num_dice=3, level=1, seed=7, **kwargs):
        return CombatState.new(PlayerDice([BASIC_DIE] * num_dice), current_level=level, seed=seed, **kwargs)

    return make
