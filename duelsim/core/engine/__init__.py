"""Core engine components.

This package contains the fundamental engine systems:
- geometry.py: distance and hit predicates
- scheduler.py: cooperative periodic timers polled by the engine
- battle_state.py: battle phases, the bounded battle log and snapshots
"""

from .geometry import distance, in_attack_range, is_hit
from .scheduler import PeriodicTimer
from .battle_state import BattlePhase, BattleLog, BattleState, BattleSnapshot

__all__ = [
    "distance",
    "in_attack_range",
    "is_hit",
    "PeriodicTimer",
    "BattlePhase",
    "BattleLog",
    "BattleState",
    "BattleSnapshot",
]
