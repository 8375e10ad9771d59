"""Per-tick combat AI.

Each tick a combatant either closes distance on its opponent or, once close
enough, swings whenever its cooldown allows. The AI only moves and starts
swings; whether a swing connects is decided by the combat resolver.

Decision order for one combatant:
1. Tick the attack cooldown down; a finished cooldown ends the swing.
2. Outside ``attack_range + approach_margin``: step toward the opponent
   along x, never closer than ``attack_range``.
3. Inside that band: keep stepping in while beyond ``attack_range`` and
   start a new swing if the cooldown is spent.
4. Clamp x into the arena and apply the cosmetic vertical bob.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum, auto

from ...core.data import BattleConfig, Facing, Vector2
from ...core.engine.geometry import distance
from ..entities.combatant import CombatantState


class AIAction(Enum):
    """What a combatant did on a tick."""
    APPROACH = auto()   # Closing distance, not yet engaged
    ATTACK = auto()     # Started a new swing
    HOLD = auto()       # Engaged but waiting on cooldown


@dataclass(frozen=True)
class AIDecision:
    """Represents an AI decision with reasoning."""
    action: AIAction
    distance: float
    reasoning: str = ""


class CombatAI:
    """Approach-then-attack behaviour shared by every archetype."""

    def __init__(self, config: BattleConfig):
        self.config = config

    def _tick_cooldown(self, me: CombatantState) -> CombatantState:
        if me.attack_cooldown <= 0:
            return me
        cooldown = me.attack_cooldown - 1
        if cooldown == 0:
            return dataclasses.replace(
                me, attack_cooldown=0, is_attacking=False, swing_landed=False
            )
        return dataclasses.replace(me, attack_cooldown=cooldown)

    def _step_toward(self, me: CombatantState, opponent: CombatantState) -> float:
        """New x after one step toward ``opponent``, stopping at weapon range."""
        step = self.config.move_step_for(me.move_speed)
        if opponent.position.x >= me.position.x:
            limit = opponent.position.x - me.attack_range
            return max(me.position.x, min(me.position.x + step, limit))
        limit = opponent.position.x + me.attack_range
        return min(me.position.x, max(me.position.x - step, limit))

    def decide(self, me: CombatantState, opponent: CombatantState) -> AIDecision:
        """Classify what ``me`` will do this tick without changing anything."""
        gap = distance(me.position, opponent.position)
        if gap > me.attack_range + self.config.approach_margin:
            return AIDecision(AIAction.APPROACH, gap, "Opponent out of reach")
        cooldown_after_tick = max(0, me.attack_cooldown - 1)
        if cooldown_after_tick == 0:
            return AIDecision(AIAction.ATTACK, gap, "Engaged and ready to swing")
        return AIDecision(AIAction.HOLD, gap, f"Engaged, {cooldown_after_tick} ticks to recover")

    def step(
        self,
        me: CombatantState,
        opponent: CombatantState,
        bob: float = 0.0,
    ) -> tuple[CombatantState, AIDecision]:
        """Advance one combatant by one tick.

        Args:
            me: The combatant acting
            opponent: The opponent as seen at the start of the tick
            bob: Cosmetic vertical offset drawn for this tick

        Returns:
            Tuple of (new state, decision taken)
        """
        if not me.alive:
            return me, AIDecision(AIAction.HOLD, distance(me.position, opponent.position), "Defeated")

        decision = self.decide(me, opponent)
        me = self._tick_cooldown(me)

        new_x = me.position.x
        if decision.action is AIAction.APPROACH or decision.distance > me.attack_range:
            new_x = self._step_toward(me, opponent)

        changes = {
            "facing": Facing.toward(me.position.x, opponent.position.x),
        }
        if decision.action is AIAction.ATTACK:
            changes.update(
                is_attacking=True,
                swing_landed=False,
                attack_cooldown=self.config.cooldown_for(me.attack_speed),
            )

        position = self.config.arena_bounds.clamp(me.position.with_x(new_x))
        changes["position"] = position
        changes["bob"] = self._clamp_bob(position, bob)

        return dataclasses.replace(me, **changes), decision

    def _clamp_bob(self, position: Vector2, bob: float) -> float:
        """Limit ``bob`` so the drawn position stays inside the arena margins."""
        limit = self.config.vertical_jitter
        bob = max(-limit, min(limit, bob))
        drawn = self.config.arena_bounds.clamp(position.with_y(position.y + bob))
        return drawn.y - position.y
