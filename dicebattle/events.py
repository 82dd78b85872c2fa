"""
Battle events.

DisplayEvent values are what resolution and the enemy scheduler hand to
the animation sequencer. BattleEvent values go out on the engine EventBus
for anything else that wants to react (sound, logging, scene changes).
"""

from enum import Enum, auto


class DisplayEvent(Enum):
    """A combat outcome worth showing."""
    PLAYER_SHOOT_ENEMY = auto()
    PLAYER_BREAK_SHIELD = auto()
    PLAYER_NEW_SHIELD = auto()
    ENEMY_SHOOT_PLAYER = auto()
    ENEMY_BREAK_SHIELD = auto()
    ENEMY_NEW_SHIELD = auto()
    ENEMY_HEAL = auto()


class BattleEvent(Enum):
    """Battle system events."""
    BATTLE_STARTED = auto()   # level, num_dice
    DIE_REROLLED = auto()     # die_index
    ROLL_ACCEPTED = auto()    # events
    ATTACK_SCHEDULED = auto() # slot, kind, value, cooldown
    DISPLAY_EVENT = auto()    # kind
    BATTLE_ENDED = auto()     # outcome, level, frames
