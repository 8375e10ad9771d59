"""
Combat resolution for one battle tick.

This module turns the prior pair of combatant states plus the random draws
for the tick into the next pair of states. It is a pure function: all
randomness arrives through :class:`TickDraws`, so tests can feed exact
values and the engine can stay a thin scheduler around it.

Ordering within a tick:
1. Both AIs step, each reading its opponent as it was at the start of the tick.
2. The first side's swing resolves, then the second side's.
3. A combatant defeated by the first side's swing does not strike back, so
   the first side wins any exchange that would otherwise be mutually lethal.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..core.data import BattleConfig, Side
from ..core.engine.geometry import is_hit
from .ai.combat_ai import AIAction, AIDecision, CombatAI
from .entities.combatant import CombatantState


@dataclass(frozen=True)
class TickDraws:
    """Random values consumed by one tick."""
    first_damage: int
    second_damage: int
    first_bob: float = 0.0
    second_bob: float = 0.0

    def damage_for(self, side: Side) -> int:
        return self.first_damage if side is Side.FIRST else self.second_damage

    def bob_for(self, side: Side) -> float:
        return self.first_bob if side is Side.FIRST else self.second_bob

    @classmethod
    def fixed(cls, damage: int, bob: float = 0.0) -> "TickDraws":
        """Same damage and bob for both sides."""
        return cls(damage, damage, bob, bob)


@dataclass(frozen=True)
class HitRecord:
    """One swing that connected."""
    attacker: Side
    target: Side
    damage: int
    health_remaining: int

    @property
    def lethal(self) -> bool:
        return self.health_remaining == 0


@dataclass(frozen=True)
class TickOutcome:
    """Result of resolving one tick."""
    first: CombatantState
    second: CombatantState
    decisions: dict[Side, AIDecision] = field(default_factory=dict)
    hits: tuple[HitRecord, ...] = ()
    log_lines: tuple[str, ...] = ()
    winner: Optional[Side] = None

    def fighter(self, side: Side) -> CombatantState:
        return self.first if side is Side.FIRST else self.second

    @property
    def attacks_launched(self) -> tuple[Side, ...]:
        return tuple(
            side for side, decision in self.decisions.items()
            if decision.action is AIAction.ATTACK
        )


def draw_tick(rng: np.random.Generator, config: BattleConfig) -> TickDraws:
    """Draw the damage rolls and cosmetic bobs for one tick.

    Damage is uniform over the inclusive integer range
    ``[config.min_damage, config.max_damage]``.
    """
    damage = rng.integers(config.min_damage, config.max_damage + 1, size=2)
    jitter = config.vertical_jitter
    bob = rng.uniform(-jitter, jitter, size=2) if jitter > 0 else np.zeros(2)
    return TickDraws(
        first_damage=int(damage[0]),
        second_damage=int(damage[1]),
        first_bob=float(bob[0]),
        second_bob=float(bob[1]),
    )


def format_hit(attacker: CombatantState, damage: int, target: CombatantState) -> str:
    """Battle log line for a connected swing."""
    return f"{attacker.name} deals {damage} damage to {target.name}!"


def _clamp_damage(damage: int, config: BattleConfig) -> int:
    return int(min(config.max_damage, max(config.min_damage, damage)))


def determine_winner(first: CombatantState, second: CombatantState) -> Optional[Side]:
    """Winner once at least one side is down; the first side wins ties."""
    if not second.alive:
        return Side.FIRST
    if not first.alive:
        return Side.SECOND
    return None


def resolve_tick(
    first: CombatantState,
    second: CombatantState,
    draws: TickDraws,
    config: BattleConfig,
    ai: Optional[CombatAI] = None,
) -> TickOutcome:
    """Compute both combatants' next states from one prior snapshot.

    Args:
        first: First side's state at the start of the tick
        second: Second side's state at the start of the tick
        draws: Damage rolls and bobs for this tick
        config: Battle configuration
        ai: Combat AI to use (a default one is built from ``config``)

    Returns:
        TickOutcome with new states, connected hits, log lines and winner
    """
    ai = ai or CombatAI(config)

    new_first, first_decision = ai.step(first, second, draws.first_bob)
    new_second, second_decision = ai.step(second, first, draws.second_bob)
    fighters = {Side.FIRST: new_first, Side.SECOND: new_second}

    hits: list[HitRecord] = []
    log_lines: list[str] = []

    for side in (Side.FIRST, Side.SECOND):
        attacker = fighters[side]
        target = fighters[side.opponent]
        if not attacker.alive or not target.alive:
            continue
        if attacker.swing_landed or not is_hit(attacker, target):
            continue

        damage = _clamp_damage(draws.damage_for(side), config)
        target = target.take_damage(damage)
        attacker = dataclasses.replace(attacker, swing_landed=True)
        fighters[side] = attacker
        fighters[side.opponent] = target

        hits.append(HitRecord(side, side.opponent, damage, target.health))
        log_lines.append(format_hit(attacker, damage, target))

    new_first = fighters[Side.FIRST]
    new_second = fighters[Side.SECOND]
    return TickOutcome(
        first=new_first,
        second=new_second,
        decisions={Side.FIRST: first_decision, Side.SECOND: second_decision},
        hits=tuple(hits),
        log_lines=tuple(log_lines),
        winner=determine_winner(new_first, new_second),
    )
