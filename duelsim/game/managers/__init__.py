"""Manager systems for battle coordination.

This package contains the manager classes that coordinate the battle
through the event-driven architecture.
"""

from .log_manager import LogManager, LogLevel, LogCategory, LogEntry
from .phase_manager import PhaseManager, BattlePhaseTransitionRule

__all__ = [
    "LogManager",
    "LogLevel",
    "LogCategory",
    "LogEntry",
    "PhaseManager",
    "BattlePhaseTransitionRule",
]
