"""
Dice Battle game module.

Built on top of the engine:
- Dice and faces, and the per-die rolling state machine
- Roll resolution (what a commit does)
- Enemy attack scheduler
- Animation sequencer for display events
- BattleSystem, the per-frame controller, and the BattleScene that hosts it
"""

from dicebattle.dice import Face, Die, PlayerDice, BASIC_DIE
from dicebattle.events import DisplayEvent, BattleEvent
from dicebattle.rolling import LockedDie, RollingDie, RolledDice
from dicebattle.state import ActorState, PlayerState, EnemyState, CombatState
from dicebattle.scheduler import AttackKind, EnemyAttack, EnemyAttackState
from dicebattle.resolution import accept_rolls
from dicebattle.animation import AnimationSequencer
from dicebattle.system import BattleOutcome, BattleSystem
from dicebattle.config import BattleConfig, load_player_dice

__all__ = [
    # Dice
    "Face",
    "Die",
    "PlayerDice",
    "BASIC_DIE",
    "LockedDie",
    "RollingDie",
    "RolledDice",
    # State
    "ActorState",
    "PlayerState",
    "EnemyState",
    "CombatState",
    # Combat
    "AttackKind",
    "EnemyAttack",
    "EnemyAttackState",
    "accept_rolls",
    "DisplayEvent",
    "BattleEvent",
    # Presentation
    "AnimationSequencer",
    # Battle
    "BattleOutcome",
    "BattleSystem",
    "BattleConfig",
    "load_player_dice",
]
