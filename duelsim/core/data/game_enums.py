"""Centralized duel enums.

Single source of truth for the identifiers shared by the engine, the AI and
the presentation layer.
"""

from enum import Enum


class Side(Enum):
    """The two corners of a duel.

    ``FIRST`` is always evaluated before ``SECOND`` within a tick, which makes
    it the winner of any simultaneous-lethal exchange.
    """
    FIRST = 0
    SECOND = 1

    @property
    def opponent(self) -> "Side":
        return Side.SECOND if self is Side.FIRST else Side.FIRST

    @property
    def label(self) -> str:
        return "Fighter 1" if self is Side.FIRST else "Fighter 2"


class Facing(Enum):
    """Horizontal facing direction of a combatant."""
    LEFT = -1
    RIGHT = 1

    @classmethod
    def toward(cls, from_x: float, to_x: float) -> "Facing":
        """Facing that points from ``from_x`` toward ``to_x`` (right on ties)."""
        return cls.LEFT if to_x < from_x else cls.RIGHT


class StatKind(Enum):
    """Tunable per-combatant stats exposed to the selection UI."""
    HEALTH = "health"
    ATTACK_SPEED = "attack_speed"
    MOVE_SPEED = "move_speed"
