"""Duel game logic: combatants, AI, combat resolution and the battle engine."""

from .battle_engine import BattleEngine
from .combat_resolver import TickDraws, TickOutcome, HitRecord, draw_tick, resolve_tick

__all__ = [
    "BattleEngine",
    "TickDraws",
    "TickOutcome",
    "HitRecord",
    "draw_tick",
    "resolve_tick",
]
