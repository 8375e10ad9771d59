"""Combatant entities.

This package contains combatant definitions:
- combatant.py: static CombatantProfile archetypes and per-battle CombatantState
- catalog.py: YAML roster loading
"""

from .combatant import CombatantProfile, CombatantState
from .catalog import load_catalog, get_profile, DEFAULT_CATALOG_PATH

__all__ = [
    "CombatantProfile",
    "CombatantState",
    "load_catalog",
    "get_profile",
    "DEFAULT_CATALOG_PATH",
]
