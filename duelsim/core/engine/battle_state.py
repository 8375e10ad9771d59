"""Battle state management.

This module defines the battle phase tag, the bounded player-facing battle
log, the mutable :class:`BattleState` owned by the engine and the immutable
:class:`BattleSnapshot` handed to observers after every state change.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..data.game_enums import Side

if TYPE_CHECKING:
    from ...game.entities.combatant import CombatantProfile, CombatantState


class BattlePhase(Enum):
    """Stages of a duel."""

    IDLE = auto()        # Selecting and tuning combatants
    COUNTDOWN = auto()   # Pre-fight countdown, one step per second
    ACTIVE = auto()      # Tick loop running
    FINISHED = auto()    # A winner has been declared


class BattleLog:
    """Ordered log of the most recent battle events.

    Holds at most ``capacity`` entries; appending to a full log evicts the
    oldest entry first.
    """

    def __init__(self, capacity: int = 5, entries: Iterable[str] = ()):
        if capacity <= 0:
            raise ValueError(f"Battle log capacity must be positive, got {capacity}")
        self._entries: deque[str] = deque(entries, maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: str) -> None:
        self._entries.append(entry)

    def extend(self, entries: Iterable[str]) -> None:
        self._entries.extend(entries)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> tuple[str, ...]:
        """Entries oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))


@dataclass
class BattleState:
    """Mutable battle state owned exclusively by the engine."""

    log: BattleLog
    phase: BattlePhase = BattlePhase.IDLE
    fighters: dict[Side, "CombatantState"] = field(default_factory=dict)
    countdown_remaining: int = 0
    winner: Optional[Side] = None
    tick: int = 0

    @property
    def has_both_fighters(self) -> bool:
        return Side.FIRST in self.fighters and Side.SECOND in self.fighters

    def fighter(self, side: Side) -> "CombatantState":
        return self.fighters[side]

    def winner_profile(self) -> Optional["CombatantProfile"]:
        if self.winner is None:
            return None
        return self.fighters[self.winner].profile

    def snapshot(self) -> "BattleSnapshot":
        """Freeze the current state for observers."""
        return BattleSnapshot(
            phase=self.phase,
            tick=self.tick,
            countdown_remaining=(
                self.countdown_remaining if self.phase == BattlePhase.COUNTDOWN else None
            ),
            first=self.fighters.get(Side.FIRST),
            second=self.fighters.get(Side.SECOND),
            winner=self.winner,
            log=self.log.entries(),
        )


@dataclass(frozen=True)
class BattleSnapshot:
    """Read-only view of a battle at one instant."""

    phase: BattlePhase
    tick: int
    countdown_remaining: Optional[int]
    first: Optional["CombatantState"]
    second: Optional["CombatantState"]
    winner: Optional[Side]
    log: tuple[str, ...]

    def fighter(self, side: Side) -> Optional["CombatantState"]:
        return self.first if side is Side.FIRST else self.second

    @property
    def winner_state(self) -> Optional["CombatantState"]:
        if self.winner is None:
            return None
        return self.fighter(self.winner)
