"""Combatant profiles and per-battle combatant state.

A :class:`CombatantProfile` is the static archetype from the roster; a
:class:`CombatantState` is one instance of it inside a running duel. States
are immutable values: every tick produces fresh states via
``dataclasses.replace`` so a snapshot handed to the presentation layer can
never change underneath it.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

from ...core.data import BattleConfig, Facing, Side, Vector2


@dataclass(frozen=True)
class CombatantProfile:
    """Static definition of a combatant archetype."""
    name: str
    glyph: str
    base_health: int
    attack_range: float
    color: str = "#ffffff"

    def __post_init__(self):
        if not self.name:
            raise ValueError("Combatant profile needs a name")
        if self.base_health <= 0:
            raise ValueError(
                f"{self.name}: base health must be positive, got {self.base_health}"
            )
        if self.attack_range <= 0:
            raise ValueError(
                f"{self.name}: attack range must be positive, got {self.attack_range}"
            )


@dataclass(frozen=True)
class CombatantState:
    """Live state of one combatant for the duration of a battle.

    Invariants: ``0 <= health <= max_health``, ``alive == (health > 0)``,
    ``attack_cooldown >= 0``.
    """
    profile: CombatantProfile
    side: Side
    health: int
    max_health: int
    position: Vector2
    facing: Facing
    attack_speed: float = 1.0
    move_speed: float = 1.0
    alive: bool = True
    is_attacking: bool = False
    attack_cooldown: int = 0
    # Set once the current swing has dealt damage; a swing connects at most once
    swing_landed: bool = False
    # Cosmetic vertical offset, never used for hit detection
    bob: float = 0.0

    def __post_init__(self):
        if self.max_health <= 0:
            raise ValueError(f"max_health must be positive, got {self.max_health}")
        if not 0 <= self.health <= self.max_health:
            raise ValueError(
                f"health {self.health} outside [0, {self.max_health}]"
            )
        if self.alive != (self.health > 0):
            raise ValueError("alive flag out of sync with health")
        if self.attack_cooldown < 0:
            raise ValueError("attack cooldown cannot be negative")
        if self.attack_speed <= 0 or self.move_speed <= 0:
            raise ValueError("speed multipliers must be positive")

    @classmethod
    def create(
        cls,
        profile: CombatantProfile,
        side: Side,
        config: BattleConfig,
        max_health: Optional[int] = None,
        attack_speed: float = 1.0,
        move_speed: float = 1.0,
    ) -> "CombatantState":
        """Create a fresh combatant at its side's start position.

        Args:
            profile: Archetype to instantiate
            side: Which corner the combatant starts in
            config: Battle configuration supplying start coordinates
            max_health: Tuned health override (defaults to the profile's)
            attack_speed: Attack-speed multiplier
            move_speed: Move-speed multiplier

        Returns:
            Full-health, idle CombatantState facing the opposite corner
        """
        health = profile.base_health if max_health is None else max_health
        start = config.start_position(side)
        opponent_start = config.start_position(side.opponent)
        return cls(
            profile=profile,
            side=side,
            health=health,
            max_health=health,
            position=start,
            facing=Facing.toward(start.x, opponent_start.x),
            attack_speed=attack_speed,
            move_speed=move_speed,
        )

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def attack_range(self) -> float:
        return self.profile.attack_range

    @property
    def display_position(self) -> Vector2:
        """Where the renderer should draw the combatant."""
        return self.position.with_y(self.position.y + self.bob)

    @property
    def health_fraction(self) -> float:
        return self.health / self.max_health

    def take_damage(self, damage: int) -> "CombatantState":
        """Return a copy with ``damage`` applied, clamped at zero health."""
        if damage < 0:
            raise ValueError(f"Damage cannot be negative, got {damage}")
        health = max(0, self.health - damage)
        return dataclasses.replace(self, health=health, alive=health > 0)

    def with_max_health(self, value: int) -> "CombatantState":
        """Return a copy retuned to ``value`` health (current and maximum)."""
        return dataclasses.replace(self, health=value, max_health=value, alive=True)

    def with_speeds(
        self,
        attack_speed: Optional[float] = None,
        move_speed: Optional[float] = None,
    ) -> "CombatantState":
        return dataclasses.replace(
            self,
            attack_speed=self.attack_speed if attack_speed is None else attack_speed,
            move_speed=self.move_speed if move_speed is None else move_speed,
        )

    def restored(self, config: BattleConfig) -> "CombatantState":
        """Return a copy reset to its pre-battle condition, keeping tuning."""
        return CombatantState.create(
            self.profile,
            self.side,
            config,
            max_health=self.max_health,
            attack_speed=self.attack_speed,
            move_speed=self.move_speed,
        )
