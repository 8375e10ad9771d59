"""
Phase management for a single duel.

This module centralizes every BattlePhase transition. The owning engine
hands each lifecycle event (battle started, countdown finished, winner
declared, reset) to its PhaseManager, which moves the phase according to
declarative rules and announces the change on the bus. Events from other
engines sharing the bus never reach it, and no other code assigns
``state.phase`` directly.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.engine.battle_state import BattleState

from ...core.events.events import (
    BattlePhaseChanged,
    EventType,
    GameEvent,
    LogMessage,
)
from ...core.engine.battle_state import BattlePhase


@dataclass
class BattlePhaseTransitionRule:
    """Defines a battle phase transition rule.

    A ``from_phase`` of None matches every phase.
    """

    from_phase: Optional[BattlePhase]
    event_type: EventType
    to_phase: BattlePhase
    description: str

    def matches(self, current_phase: BattlePhase, event_type: EventType) -> bool:
        """Check if this rule matches the current conditions."""
        if self.event_type != event_type:
            return False
        return self.from_phase is None or self.from_phase == current_phase


class PhaseManager:
    """Moves one engine's battle phase in response to its lifecycle events."""

    def __init__(
        self,
        battle_state: "BattleState",
        event_manager: "EventManager",
        battle_id: int = 0,
    ):
        self.state = battle_state
        self.event_manager = event_manager
        self.battle_id = battle_id

        self.battle_phase_rules: List[BattlePhaseTransitionRule] = [
            BattlePhaseTransitionRule(
                from_phase=BattlePhase.IDLE,
                event_type=EventType.BATTLE_STARTED,
                to_phase=BattlePhase.COUNTDOWN,
                description="Begin countdown when the battle is started",
            ),
            BattlePhaseTransitionRule(
                from_phase=BattlePhase.COUNTDOWN,
                event_type=EventType.COUNTDOWN_FINISHED,
                to_phase=BattlePhase.ACTIVE,
                description="Start fighting when the countdown expires",
            ),
            BattlePhaseTransitionRule(
                from_phase=BattlePhase.ACTIVE,
                event_type=EventType.BATTLE_FINISHED,
                to_phase=BattlePhase.FINISHED,
                description="Stop fighting once a winner is declared",
            ),
            BattlePhaseTransitionRule(
                from_phase=None,
                event_type=EventType.BATTLE_RESET,
                to_phase=BattlePhase.IDLE,
                description="Return to selection on reset",
            ),
        ]

    def handle_event(self, event: GameEvent) -> bool:
        """Apply the first rule matching ``event`` in the current phase.

        Returns:
            True if a rule matched
        """
        for rule in self.battle_phase_rules:
            if rule.matches(self.state.phase, event.event_type):
                self._transition_battle_phase(rule.to_phase, rule.description)
                return True

        self._emit_log(
            f"Ignored {event.event_type.name} in phase {self.state.phase.name}",
            level="WARNING",
        )
        return False

    def _transition_battle_phase(self, new_phase: BattlePhase, description: str) -> None:
        old_phase = self.state.phase
        if old_phase == new_phase:
            return

        self.state.phase = new_phase

        self.event_manager.publish(
            BattlePhaseChanged(
                tick=self.state.tick,
                old_phase=old_phase,
                new_phase=new_phase,
                battle_id=self.battle_id,
            ),
            source="PhaseManager",
        )
        self._emit_log(
            f"Battle phase: {old_phase.name} -> {new_phase.name} ({description})"
        )

    def _emit_log(
        self, message: str, category: str = "SYSTEM", level: str = "DEBUG"
    ) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                tick=self.state.tick,
                message=message,
                category=category,
                level=level,
                source="PhaseManager",
            ),
            source="PhaseManager",
        )
