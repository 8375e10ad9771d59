"""Event system for publisher-subscriber communication.

This package contains the event-driven architecture:
- event_manager.py: Publisher-subscriber event routing and coordination
- events.py: Event definitions for engine, manager and observer communication
"""

from .event_manager import EventManager
from .events import (
    GameEvent,
    EventType,
    CombatantsSelected,
    StatChanged,
    BattleStarted,
    CountdownTicked,
    CountdownFinished,
    BattlePhaseChanged,
    BattleFinished,
    BattleReset,
    AttackLaunched,
    CombatantDamaged,
    CombatantDefeated,
    SnapshotUpdated,
    LogMessage,
)

__all__ = [
    "EventManager",
    "GameEvent",
    "EventType",
    "CombatantsSelected",
    "StatChanged",
    "BattleStarted",
    "CountdownTicked",
    "CountdownFinished",
    "BattlePhaseChanged",
    "BattleFinished",
    "BattleReset",
    "AttackLaunched",
    "CombatantDamaged",
    "CombatantDefeated",
    "SnapshotUpdated",
    "LogMessage",
]
