"""Battle configuration.

All process-wide tuning constants live in :class:`BattleConfig`. The defaults
give the arcade feel of the duel screen; a YAML file can
override any of them, and tests build their own instances directly.
"""

import dataclasses
import math
import numbers
import os
from dataclasses import dataclass
from typing import Any, Optional

import yaml

from .data_structures import Bounds, Vector2
from .game_enums import Side, StatKind


DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "assets", "config", "battle.yaml",
)

# Tolerance for matching float stat values against their step grid
_STEP_EPSILON = 1e-6


@dataclass(frozen=True)
class StatRange:
    """Inclusive range with a fixed step for a tunable stat."""
    minimum: float
    maximum: float
    step: float

    def __post_init__(self):
        if self.step <= 0:
            raise ValueError(f"Stat step must be positive, got {self.step}")
        if self.minimum > self.maximum:
            raise ValueError(
                f"Stat range is inverted: {self.minimum} > {self.maximum}"
            )

    def accepts(self, value: float) -> bool:
        """Check that ``value`` is a number inside the range and on the step grid."""
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        if not math.isfinite(value):
            return False
        if value < self.minimum - _STEP_EPSILON or value > self.maximum + _STEP_EPSILON:
            return False
        steps = (value - self.minimum) / self.step
        return abs(steps - round(steps)) < _STEP_EPSILON * max(1.0, abs(steps))


@dataclass(frozen=True)
class BattleConfig:
    """Fixed parameters of the duel simulation.

    Distances are arena units, durations in the ``*_period`` fields are
    seconds, and cooldowns are counted in battle ticks.
    """

    # Arena
    arena_width: float = 500.0
    arena_height: float = 300.0
    fighter_radius: float = 20.0
    vertical_margin: float = 40.0
    start_x_first: float = 80.0
    start_x_second: float = 420.0
    start_y: float = 150.0

    # Timing
    countdown_seconds: int = 5
    countdown_period: float = 1.0
    tick_period: float = 0.1

    # Damage (inclusive)
    min_damage: int = 10
    max_damage: int = 29

    # Movement
    approach_margin: float = 10.0
    move_scale: float = 5.0
    vertical_jitter: float = 2.0

    # Cooldown formula: max(min_cooldown, base_cooldown - attack_speed * cooldown_scale)
    base_cooldown: int = 15
    cooldown_scale: float = 5.0
    min_cooldown: int = 3

    # Player-facing battle log
    log_capacity: int = 5

    # Tunable stat ranges
    health_range: StatRange = StatRange(50, 200, 10)
    attack_speed_range: StatRange = StatRange(0.5, 3.0, 0.1)
    move_speed_range: StatRange = StatRange(0.5, 3.0, 0.1)

    def __post_init__(self):
        if self.arena_width <= 0 or self.arena_height <= 0:
            raise ValueError("Arena dimensions must be positive")
        if self.fighter_radius < 0 or 2 * self.fighter_radius > self.arena_width:
            raise ValueError("Fighter radius does not fit inside the arena")
        if self.vertical_margin < 0 or 2 * self.vertical_margin > self.arena_height:
            raise ValueError("Vertical margin does not fit inside the arena")
        if self.countdown_seconds < 0:
            raise ValueError("Countdown cannot be negative")
        if self.countdown_period <= 0 or self.tick_period <= 0:
            raise ValueError("Timer periods must be positive")
        if self.min_damage <= 0 or self.max_damage < self.min_damage:
            raise ValueError(
                f"Invalid damage range [{self.min_damage}, {self.max_damage}]"
            )
        if self.min_cooldown <= 0:
            raise ValueError("Minimum cooldown must be at least one tick")
        if self.base_cooldown < self.min_cooldown:
            raise ValueError("Base cooldown is below the minimum cooldown")
        if self.log_capacity <= 0:
            raise ValueError("Battle log capacity must be positive")
        if self.move_scale < 0 or self.approach_margin < 0 or self.vertical_jitter < 0:
            raise ValueError("Movement parameters cannot be negative")
        if not self.arena_bounds.contains(self.start_position(Side.FIRST)):
            raise ValueError("First start position is outside the arena")
        if not self.arena_bounds.contains(self.start_position(Side.SECOND)):
            raise ValueError("Second start position is outside the arena")

    @property
    def arena_bounds(self) -> Bounds:
        """Rectangle a combatant's centre is allowed to occupy."""
        return Bounds(
            min_x=self.fighter_radius,
            max_x=self.arena_width - self.fighter_radius,
            min_y=self.vertical_margin,
            max_y=self.arena_height - self.vertical_margin,
        )

    def start_position(self, side: Side) -> Vector2:
        x = self.start_x_first if side is Side.FIRST else self.start_x_second
        return Vector2(x, self.start_y)

    def cooldown_for(self, attack_speed: float) -> int:
        """Ticks between attacks for a given attack-speed multiplier."""
        raw = self.base_cooldown - attack_speed * self.cooldown_scale
        return max(self.min_cooldown, int(round(raw)))

    def move_step_for(self, move_speed: float) -> float:
        """Distance covered in one tick for a given move-speed multiplier."""
        return move_speed * self.move_scale

    def stat_range(self, kind: StatKind) -> StatRange:
        if kind is StatKind.HEALTH:
            return self.health_range
        if kind is StatKind.ATTACK_SPEED:
            return self.attack_speed_range
        return self.move_speed_range

    def replace(self, **changes: Any) -> "BattleConfig":
        """Return a copy with ``changes`` applied (validated again)."""
        return dataclasses.replace(self, **changes)


_RANGE_FIELDS = {"health_range", "attack_speed_range", "move_speed_range"}


def _parse_overrides(data: dict[str, Any], source: str) -> dict[str, Any]:
    known = {f.name for f in dataclasses.fields(BattleConfig)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown battle setting '{key}' in {source}")
        if key in _RANGE_FIELDS:
            try:
                value = StatRange(
                    minimum=value["min"], maximum=value["max"], step=value["step"]
                )
            except (KeyError, TypeError) as e:
                raise ValueError(
                    f"Setting '{key}' in {source} needs min, max and step: {e}"
                )
        overrides[key] = value
    return overrides


def load_battle_config(config_path: Optional[str] = None) -> BattleConfig:
    """Load a :class:`BattleConfig` from a YAML file.

    Args:
        config_path: Path to the YAML file. Defaults to the packaged
            ``assets/config/battle.yaml``.

    Returns:
        BattleConfig with the file's settings applied over the defaults

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML, or holds unknown keys or
            invalid values
    """
    path = config_path or DEFAULT_CONFIG_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Battle config file not found: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML battle config {path}: {e}")

    section = data.get("battle", {}) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ValueError(f"Invalid battle config structure in {path}")

    try:
        return BattleConfig(**_parse_overrides(section, path))
    except TypeError as e:
        # A wrongly typed value fails the numeric checks in __post_init__
        raise ValueError(f"Invalid battle config in {path}: {e}")
