"""Distance and hit predicates for the duel arena.

Pure functions with no side effects. Hit detection is deliberately separate
from AI movement so each can be tested on its own.
"""

from typing import TYPE_CHECKING

from ..data.data_structures import Vector2

if TYPE_CHECKING:
    from ...game.entities.combatant import CombatantState


def distance(a: Vector2, b: Vector2) -> float:
    """Euclidean distance between two arena positions."""
    return a.distance_to(b)


def in_attack_range(attacker_pos: Vector2, target_pos: Vector2, attack_range: float) -> bool:
    """Check whether ``target_pos`` is within ``attack_range`` of ``attacker_pos``."""
    return distance(attacker_pos, target_pos) <= attack_range


def is_hit(attacker: "CombatantState", target: "CombatantState") -> bool:
    """Check whether ``attacker``'s swing reaches ``target``.

    True only while the attacker is mid-swing and the target stands within
    the attacker's weapon range.
    """
    return attacker.is_attacking and in_attack_range(
        attacker.position, target.position, attacker.attack_range
    )
