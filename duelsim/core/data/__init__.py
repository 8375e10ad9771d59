"""Core data structures and definitions.

This package contains fundamental data types and duel definitions:
- data_structures.py: Vector2 and Bounds for arena positions
- game_enums.py: Sides, facing directions and tunable stat kinds
- config.py: BattleConfig and its YAML loader
"""

from .data_structures import Vector2, Bounds
from .game_enums import Side, Facing, StatKind
from .config import BattleConfig, StatRange, load_battle_config, DEFAULT_CONFIG_PATH

__all__ = [
    "Vector2",
    "Bounds",
    "Side",
    "Facing",
    "StatKind",
    "BattleConfig",
    "StatRange",
    "load_battle_config",
    "DEFAULT_CONFIG_PATH",
]
