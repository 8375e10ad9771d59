"""Duel events and their types.

This module defines every notification the battle engine and its managers
exchange over the event bus.

Event Design Principles:
- Events are immutable dataclasses
- Every event carries the engine tick it was raised on
- Events use enums (Side, BattlePhase, StatKind) instead of magic strings
- Lifecycle and snapshot events carry the emitting engine's battle_id so
  listeners on a shared bus can tell concurrent duels apart
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import Side, StatKind

if TYPE_CHECKING:
    from ..engine.battle_state import BattlePhase, BattleSnapshot
    from ...game.entities.combatant import CombatantProfile


class EventType(Enum):
    """Types of events that managers and observers can subscribe to."""
    # Setup Events
    COMBATANTS_SELECTED = auto()
    STAT_CHANGED = auto()

    # Phase Events
    BATTLE_STARTED = auto()
    COUNTDOWN_TICKED = auto()
    COUNTDOWN_FINISHED = auto()
    BATTLE_PHASE_CHANGED = auto()
    BATTLE_FINISHED = auto()
    BATTLE_RESET = auto()

    # Combat Events
    ATTACK_LAUNCHED = auto()
    COMBATANT_DAMAGED = auto()
    COMBATANT_DEFEATED = auto()

    # Observation Events
    SNAPSHOT_UPDATED = auto()

    # Logging Events
    LOG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all duel events."""
    tick: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class CombatantsSelected(GameEvent):
    """Event emitted when both corners have been filled."""
    first: "CombatantProfile"
    second: "CombatantProfile"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANTS_SELECTED)


@dataclass(frozen=True)
class StatChanged(GameEvent):
    """Event emitted when a combatant's tunable stat is changed before a battle."""
    side: Side
    stat: StatKind
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STAT_CHANGED)


@dataclass(frozen=True)
class BattleStarted(GameEvent):
    """Event emitted when the user starts a battle (countdown begins)."""
    countdown_seconds: int
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_STARTED)


@dataclass(frozen=True)
class CountdownTicked(GameEvent):
    """Event emitted once per countdown second."""
    remaining: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COUNTDOWN_TICKED)


@dataclass(frozen=True)
class CountdownFinished(GameEvent):
    """Event emitted when the countdown reaches zero."""
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COUNTDOWN_FINISHED)


@dataclass(frozen=True)
class BattlePhaseChanged(GameEvent):
    """Event emitted when the battle phase changes."""
    old_phase: "BattlePhase"
    new_phase: "BattlePhase"
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_PHASE_CHANGED)


@dataclass(frozen=True)
class BattleFinished(GameEvent):
    """Event emitted when a winner is declared."""
    winner: Side
    winner_name: str
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_FINISHED)


@dataclass(frozen=True)
class BattleReset(GameEvent):
    """Event emitted when the battle is reset to the selection screen."""
    previous_phase: "BattlePhase"
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_RESET)


@dataclass(frozen=True)
class AttackLaunched(GameEvent):
    """Event emitted when a combatant begins a swing."""
    side: Side
    cooldown: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ATTACK_LAUNCHED)


@dataclass(frozen=True)
class CombatantDamaged(GameEvent):
    """Event emitted when a swing connects."""
    attacker: Side
    target: Side
    damage: int
    health_remaining: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DAMAGED)


@dataclass(frozen=True)
class CombatantDefeated(GameEvent):
    """Event emitted when a combatant's health reaches zero."""
    side: Side
    name: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DEFEATED)


@dataclass(frozen=True)
class SnapshotUpdated(GameEvent):
    """Event emitted after every state change, for the presentation layer."""
    snapshot: "BattleSnapshot"
    battle_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SNAPSHOT_UPDATED)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a diagnostic log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)
