import pytest
from types import SimpleNamespace
import pygame
from engine.core.events import EngineEvent
from engine.core.game import Game, GameConfig
from engine.core.scene import Scene

class CountingScene(Scene):
    def __init__(self, game, pop_after=None):
        super().__init__(game)
        self.updates = 0
        self.renders = 0
        self.pop_after = pop_after

    def update(self, dt):
        self.updates += 1
        if self.updates == self.pop_after:
            self.game.scene_manager.pop()

    def render(self, surface, alpha):
        self.renders += 1

@pytest.fixture
def game():
    return Game(GameConfig(title="Test"))

def test_game_services(game):
    assert game.config.width == 480
    assert game.scene_manager.is_empty
    assert game.frame_count == 0

def test_fixed_update_advances_scene(game):
    scene = CountingScene(game)
    game.scene_manager.push(scene)

    game._fixed_update(game.config.fixed_timestep)
    game._fixed_update(game.config.fixed_timestep)

    assert scene.updates == 2
    assert game.frame_count == 2

def test_pause_stops_scene_updates(game):
    received = []
    game.event_bus.subscribe(EngineEvent.GAME_PAUSE, received.append, weak=False)
    scene = CountingScene(game)
    game.scene_manager.push(scene)

    game.input.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_p))
    game._fixed_update(game.config.fixed_timestep)
    game._fixed_update(game.config.fixed_timestep)

    assert scene.updates == 0
    assert len(received) == 1

    # Release and press again to resume
    game.input.process_event(SimpleNamespace(type=pygame.KEYUP, key=pygame.K_p))
    game._fixed_update(game.config.fixed_timestep)
    game.input.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_p))
    game._fixed_update(game.config.fixed_timestep)

    assert scene.updates == 1

def test_run_ends_when_stack_empties(game):
    received = []
    game.event_bus.subscribe(EngineEvent.GAME_QUIT, received.append, weak=False)
    scene = CountingScene(game, pop_after=3)
    game.scene_manager.push(scene)

    game.run()

    assert scene.updates == 3
    assert scene.renders >= 1
    assert len(received) == 1
    assert game.scene_manager.is_empty
