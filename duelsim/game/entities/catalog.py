"""Combatant roster loading.

The roster of selectable archetypes is data, loaded from a YAML file into
immutable :class:`CombatantProfile` objects. The presentation layer treats
the returned tuple as a read-only catalog.
"""

import os
from typing import Any, Optional

import yaml

from .combatant import CombatantProfile


DEFAULT_CATALOG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "assets", "data", "combatants.yaml",
)

_REQUIRED_KEYS = ("name", "glyph", "base_health", "attack_range")


def _parse_profile(entry: Any, index: int, source: str) -> CombatantProfile:
    if not isinstance(entry, dict):
        raise ValueError(f"Combatant #{index} in {source} is not a mapping")

    missing = [key for key in _REQUIRED_KEYS if key not in entry]
    if missing:
        raise KeyError(
            f"Combatant #{index} in {source} is missing: {', '.join(missing)}"
        )

    try:
        return CombatantProfile(
            name=str(entry["name"]),
            glyph=str(entry["glyph"]),
            base_health=int(entry["base_health"]),
            attack_range=float(entry["attack_range"]),
            color=str(entry.get("color", "#ffffff")),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid combatant #{index} in {source}: {e}")


def load_catalog(catalog_path: Optional[str] = None) -> tuple[CombatantProfile, ...]:
    """Load the combatant roster from YAML.

    Args:
        catalog_path: Path to the roster file. Defaults to the packaged
            ``assets/data/combatants.yaml``.

    Returns:
        Profiles in file order

    Raises:
        FileNotFoundError: If the roster file does not exist
        KeyError: If an entry lacks a required key
        ValueError: If the file is not valid YAML, the structure or a value
            is invalid, or names repeat
    """
    path = catalog_path or DEFAULT_CATALOG_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Combatant catalog not found: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML catalog {path}: {e}")

    entries = data.get("combatants") if isinstance(data, dict) else None
    if not isinstance(entries, list) or not entries:
        raise ValueError(f"Invalid catalog structure in {path}: expected a 'combatants' list")

    profiles = tuple(
        _parse_profile(entry, index, path) for index, entry in enumerate(entries)
    )

    seen: set[str] = set()
    for profile in profiles:
        if profile.name in seen:
            raise ValueError(f"Duplicate combatant name '{profile.name}' in {path}")
        seen.add(profile.name)

    return profiles


def get_profile(catalog: tuple[CombatantProfile, ...], name: str) -> CombatantProfile:
    """Look up a profile by name (case-insensitive).

    Raises:
        KeyError: If no profile has that name
    """
    wanted = name.strip().lower()
    for profile in catalog:
        if profile.name.lower() == wanted:
            return profile
    raise KeyError(f"No combatant named '{name}' in catalog")
