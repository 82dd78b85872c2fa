import pytest
from dicebattle.dice import Face
from dicebattle.events import DisplayEvent
from dicebattle.resolution import DISRUPT_FRAMES_PER_POINT, accept_rolls, tally_faces, triangular
from dicebattle.rolling import LockedDie, RollingDie
from dicebattle.scheduler import AttackKind, EnemyAttack, EnemyAttackState

def test_triangular():
    assert [triangular(n) for n in range(5)] == [0, 1, 3, 6, 10]

def test_tally_folds_multi_shots_into_shoot():
    counts = tally_faces([Face.SHOOT, Face.DOUBLE_SHOT, Face.TRIPLE_SHOT, Face.SHIELD])
    assert counts[Face.SHOOT] == 6
    assert counts[Face.SHIELD] == 1
    assert Face.DOUBLE_SHOT not in counts
    assert Face.TRIPLE_SHOT not in counts

def test_end_to_end_commit(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.SHOOT, Face.SHOOT, Face.SHIELD)

    events = accept_rolls(state)

    assert events == [DisplayEvent.PLAYER_NEW_SHIELD, DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.player.shield_count == 1
    assert state.player.health == 120
    assert state.enemy.health == 47
    for die in state.dice:
        assert isinstance(die, RollingDie)
        assert die.remaining_frames == 120

@pytest.mark.parametrize("shots, health", [(1, 49), (2, 47), (3, 44), (4, 40)])
def test_triangular_shot_damage(make_state, lock_dice, shots, health):
    state = lock_dice(make_state(4), *([Face.SHOOT] * shots + [Face.BLANK] * (4 - shots)))
    accept_rolls(state)
    assert state.enemy.health == health

def test_damage_saturates_at_zero(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.SHOOT, Face.SHOOT, Face.SHOOT)
    state.enemy.health = 2

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.health == 0

def test_shield_is_set_not_added(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.SHIELD, Face.SHIELD)
    state.player.shield_count = 1

    assert accept_rolls(state) == [DisplayEvent.PLAYER_NEW_SHIELD, DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.player.shield_count == 2

def test_lower_shield_is_ignored(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.SHIELD, Face.BLANK)
    state.player.shield_count = 3

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.player.shield_count == 3

def test_bypass_lowers_effective_shield(make_state, lock_dice):
    state = lock_dice(make_state(4), Face.BYPASS, Face.BYPASS, Face.SHOOT, Face.SHOOT)
    state.enemy.shield_count = 4

    assert accept_rolls(state) == [DisplayEvent.PLAYER_BREAK_SHIELD]
    assert state.enemy.shield_count == 0
    assert state.enemy.health == 50

def test_bypass_through_whole_shield_deals_damage(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.BYPASS, Face.BYPASS, Face.SHOOT)
    state.enemy.shield_count = 2

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.shield_count == 0
    assert state.enemy.health == 49

def test_weak_volley_is_absorbed(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.SHOOT, Face.SHOOT)
    state.enemy.shield_count = 5

    assert accept_rolls(state) == []
    assert state.enemy.shield_count == 5
    assert state.enemy.health == 50

def test_no_shots_still_counts_as_an_unblocked_volley(make_state, lock_dice):
    # Zero power meets zero shield: the volley lands for 0 damage
    state = lock_dice(make_state(2), Face.BLANK, Face.BLANK)

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.health == 50

def test_bypass_alone_clears_enemy_shield(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.BYPASS, Face.BYPASS)
    state.enemy.shield_count = 2

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.shield_count == 0
    assert state.enemy.health == 50

def test_partial_bypass_without_shots_is_absorbed(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.BYPASS, Face.BLANK)
    state.enemy.shield_count = 3

    assert accept_rolls(state) == []
    assert state.enemy.shield_count == 3

def test_heal_face_does_not_heal_player(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.HEAL, Face.HEAL, Face.BLANK)
    state.player.health = 100

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.player.health == 100

def test_event_order(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.SHOOT, Face.HEAL, Face.SHIELD)

    assert accept_rolls(state) == [
        DisplayEvent.PLAYER_NEW_SHIELD,
        DisplayEvent.PLAYER_SHOOT_ENEMY,
    ]

def test_disrupt_delays_both_slots(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.DISRUPT, Face.DISRUPT, Face.BLANK)
    state.attacks = [
        EnemyAttackState(EnemyAttack(AttackKind.SHOOT, 1), cooldown=10, max_cooldown=130),
        EnemyAttackState(EnemyAttack(AttackKind.SHIELD, 2), cooldown=0, max_cooldown=200),
    ]

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.attacks[0].cooldown == 10 + 3 * DISRUPT_FRAMES_PER_POINT
    assert state.attacks[1].cooldown == 180
    assert state.attacks[0].max_cooldown == 130

def test_disrupt_leaves_empty_slot_empty(make_state, lock_dice):
    state = lock_dice(make_state(2), Face.DISRUPT, Face.BLANK)
    state.attacks = [
        None,
        EnemyAttackState(EnemyAttack(AttackKind.HEAL, 0), cooldown=5, max_cooldown=140),
    ]

    accept_rolls(state)

    assert state.attacks[0] is None
    assert state.attacks[1].cooldown == 65

def test_double_shot_burns_out_its_own_die(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.DOUBLE_SHOT, Face.SHOOT, Face.BLANK)

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.health == 44

    assert state.dice[0] == LockedDie(face=Face.MALFUNCTION, malfunction_cooldown=300)
    assert isinstance(state.dice[1], RollingDie)
    assert isinstance(state.dice[2], RollingDie)

def test_triple_shot_burns_out_every_locked_die(make_state, lock_dice):
    state = lock_dice(make_state(3), Face.TRIPLE_SHOT, Face.SHIELD, Face.BLANK)
    state.dice[2] = RollingDie(remaining_frames=50, preview_face=Face.BLANK)

    events = accept_rolls(state)

    assert events == [DisplayEvent.PLAYER_NEW_SHIELD, DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.health == 44
    for i in (0, 1):
        assert state.dice[i] == LockedDie(face=Face.MALFUNCTION, malfunction_cooldown=300)
    # Rolling dice are not locked, so the cascade and reroll-all skip them
    assert state.dice[2].remaining_frames == 50

def test_reroll_all_skips_running_malfunctions(make_state):
    state = make_state(3)
    state.dice[0] = LockedDie(face=Face.MALFUNCTION, malfunction_cooldown=100)
    state.dice[1] = LockedDie(face=Face.MALFUNCTION, malfunction_cooldown=0)
    state.dice[2] = LockedDie(face=Face.BLANK)

    accept_rolls(state)

    assert state.dice[0] == LockedDie(face=Face.MALFUNCTION, malfunction_cooldown=100)
    assert isinstance(state.dice[1], RollingDie)
    assert state.dice[1].remaining_frames == 120
    assert isinstance(state.dice[2], RollingDie)

def test_commit_with_only_rolling_dice(make_state):
    state = make_state(2)

    assert accept_rolls(state) == [DisplayEvent.PLAYER_SHOOT_ENEMY]
    assert state.enemy.health == 50
    assert state.player.shield_count == 0
