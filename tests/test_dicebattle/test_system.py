import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
import pygame
from dicebattle.dice import Face
from dicebattle.events import BattleEvent, DisplayEvent
from dicebattle.rolling import LockedDie, RollingDie
from dicebattle.scheduler import AttackKind, EnemyAttack, EnemyAttackState
from dicebattle.state import CombatState
from dicebattle.system import BattleOutcome, BattleSystem
from engine.input.handler import InputHandler

def shoot_now(damage):
    return EnemyAttackState(EnemyAttack(AttackKind.SHOOT, damage), cooldown=0, max_cooldown=130)

def test_battle_started_event(combat_state, event_bus, recorder):
    received = recorder(BattleEvent.BATTLE_STARTED)
    BattleSystem(combat_state, events=event_bus)

    assert received[0]["level"] == 1
    assert received[0]["num_dice"] == 2

def test_selection_wraps(combat_state):
    battle = BattleSystem(combat_state)
    assert battle.selected_die == 0
    assert battle.select(-1) == 1
    assert battle.select(1) == 0
    assert battle.select(3) == 1

def test_reroll_selected(combat_state, lock_dice, event_bus, recorder):
    received = recorder(BattleEvent.DIE_REROLLED)
    sfx = MagicMock()
    lock_dice(combat_state, Face.SHOOT, Face.MALFUNCTION)
    battle = BattleSystem(combat_state, events=event_bus, sfx=sfx)

    battle.select(1)
    assert battle.reroll_selected()
    assert combat_state.dice[1].remaining_frames == 7
    assert received[0]["die_index"] == 1
    sfx.roll.assert_called_once()

def test_reroll_blocked_by_malfunction(combat_state, event_bus, recorder):
    received = recorder(BattleEvent.DIE_REROLLED)
    combat_state.dice[0] = LockedDie.malfunctioning()
    battle = BattleSystem(combat_state, events=event_bus)

    assert not battle.reroll_selected()
    assert received == []

def test_commit_resolves_on_next_update(combat_state, lock_dice, event_bus, recorder):
    received = recorder(BattleEvent.ROLL_ACCEPTED, BattleEvent.DISPLAY_EVENT)
    sfx = MagicMock()
    lock_dice(combat_state, Face.SHOOT, Face.SHIELD)
    battle = BattleSystem(combat_state, events=event_bus, sfx=sfx)

    battle.commit()
    assert combat_state.enemy.health == 50

    events = battle.update()

    assert events == [DisplayEvent.PLAYER_NEW_SHIELD, DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert combat_state.enemy.health == 49
    sfx.roll_multi.assert_called_once()
    assert received[0].type == BattleEvent.ROLL_ACCEPTED
    assert [e["kind"] for e in received[1:]] == events
    assert len(battle.sequencer.active) == 2

def test_commit_only_once(combat_state, lock_dice):
    lock_dice(combat_state, Face.SHOOT, Face.SHOOT)
    battle = BattleSystem(combat_state)

    battle.commit()
    battle.update()
    battle.update()

    assert combat_state.enemy.health == 47

def test_attack_expiry_before_same_frame_disrupt(combat_state, lock_dice):
    lock_dice(combat_state, Face.DISRUPT, Face.BLANK)
    combat_state.attacks[0] = shoot_now(3)
    battle = BattleSystem(combat_state)

    battle.commit()
    events = battle.update()

    # The attack fired before the disrupt could delay it
    assert events[0] == DisplayEvent.ENEMY_SHOOT_PLAYER
    assert combat_state.player.health == 117
    assert combat_state.attacks[0] is None

def test_enemy_events_reach_the_sequencer(combat_state):
    combat_state.attacks[1] = EnemyAttackState(EnemyAttack(AttackKind.HEAL, 5), cooldown=0, max_cooldown=130)
    battle = BattleSystem(combat_state)

    assert battle.update() == [DisplayEvent.ENEMY_HEAL]
    assert battle.sequencer.active[0].event == DisplayEvent.ENEMY_HEAL

def test_attack_scheduled_event(make_state, event_bus, recorder):
    received = recorder(BattleEvent.ATTACK_SCHEDULED)
    state = make_state(2, level=512)
    battle = BattleSystem(state, events=event_bus)

    battle.update()

    assert [e["slot"] for e in received] == [0, 1]
    assert all(128 <= e["cooldown"] <= 247 for e in received)

def test_victory(combat_state, lock_dice, event_bus, recorder):
    received = recorder(BattleEvent.BATTLE_ENDED)
    outcomes = []
    lock_dice(combat_state, Face.SHOOT, Face.SHOOT)
    combat_state.enemy.health = 3
    battle = BattleSystem(combat_state, events=event_bus)
    battle.on_battle_end(outcomes.append)

    battle.commit()
    battle.update()

    assert battle.outcome == BattleOutcome.VICTORY
    assert not battle.is_active
    assert outcomes == [BattleOutcome.VICTORY]
    assert received[0]["outcome"] == BattleOutcome.VICTORY
    assert received[0]["frames"] == 1

def test_defeat(combat_state):
    combat_state.player.health = 2
    combat_state.attacks[0] = shoot_now(2)
    battle = BattleSystem(combat_state)

    battle.update()

    assert battle.outcome == BattleOutcome.DEFEAT

def test_finished_battle_is_frozen(combat_state):
    combat_state.player.health = 1
    combat_state.attacks[0] = shoot_now(1)
    battle = BattleSystem(combat_state)
    battle.update()

    frame = battle.frame
    dice = [d.model_dump() for d in combat_state.dice]

    assert battle.update() == []
    assert battle.frame == frame
    assert [d.model_dump() for d in combat_state.dice] == dice

def test_input_drives_commands(combat_state, lock_dice):
    handler = InputHandler()
    lock_dice(combat_state, Face.SHOOT, Face.BLANK)
    battle = BattleSystem(combat_state, input_handler=handler)

    handler.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_RIGHT))
    handler.update()
    battle.update()
    assert battle.selected_die == 1

    handler.process_event(SimpleNamespace(type=pygame.KEYUP, key=pygame.K_RIGHT))
    handler.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_z))
    handler.update()
    battle.update()
    assert isinstance(combat_state.dice[1], RollingDie)
    assert isinstance(combat_state.dice[0], LockedDie)

    handler.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_RETURN))
    handler.update()
    battle.update()
    battle.update()
    assert combat_state.enemy.health == 49

def run_headless(seed, frames=3000):
    from dicebattle.dice import PlayerDice
    state = CombatState.new(PlayerDice.starter(3), current_level=4, seed=seed)
    battle = BattleSystem(state)
    for frame in range(frames):
        if frame % 131 == 0:
            battle.commit()
        if frame % 17 == 0:
            battle.select(1)
            battle.reroll_selected()
        battle.update()
        state.dice.check_invariants()
        assert state.player.health >= 0
        assert state.enemy.health >= 0
    return battle

def test_headless_run_is_deterministic():
    first = run_headless(seed=21)
    second = run_headless(seed=21)

    assert first.outcome == second.outcome
    assert first.frame == second.frame
    assert first.state.player == second.state.player
    assert first.state.enemy == second.state.enemy
