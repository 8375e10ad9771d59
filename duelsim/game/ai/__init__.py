"""AI system components.

This package contains the per-tick combat decision logic:
- combat_ai.py: approach-then-attack behaviour and its decisions
"""

from .combat_ai import CombatAI, AIAction, AIDecision

__all__ = [
    "CombatAI",
    "AIAction",
    "AIDecision",
]
