"""Spatial data structures for the duel arena.

The arena is a continuous rectangle, so positions are float vectors rather
than grid cells. ``Bounds`` describes the rectangle a position is allowed
to occupy and clamps positions into it.
"""

from dataclasses import dataclass
import math

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Vector2:
    """2D vector for arena positions.

    ``x`` runs along the arena width (the axis combatants approach on) and
    ``y`` runs along the arena height (cosmetic only).
    """
    x: float
    y: float

    def __repr__(self) -> str:
        return f"Vector2({self.x:g}, {self.y:g})"

    def distance_to(self, other: "Vector2") -> float:
        """Calculate Euclidean distance to another vector."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def with_x(self, x: float) -> "Vector2":
        return Vector2(x, self.y)

    def with_y(self, y: float) -> "Vector2":
        return Vector2(self.x, y)

    def to_numpy(self) -> NDArray[np.float64]:
        """Convert to numpy array (x, y order)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_numpy(cls, arr: NDArray[np.float64]) -> "Vector2":
        """Create Vector2 from numpy array (x, y order)."""
        if arr.shape != (2,):
            raise ValueError("Array must have shape (2,) for Vector2 conversion")
        return cls(float(arr[0]), float(arr[1]))


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle that positions are clamped into."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"Inverted bounds: {self}")

    def contains(self, position: Vector2) -> bool:
        return (
            self.min_x <= position.x <= self.max_x
            and self.min_y <= position.y <= self.max_y
        )

    def clamp(self, position: Vector2) -> Vector2:
        """Return the closest point to ``position`` inside the bounds."""
        clipped = np.clip(
            position.to_numpy(),
            [self.min_x, self.min_y],
            [self.max_x, self.max_y],
        )
        return Vector2.from_numpy(clipped)
