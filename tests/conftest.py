"""
Basic test fixtures for the duelsim test suite.

Provides configs, profiles, combatant-state builders, an event manager and a
manually advanced clock so timer-driven behaviour is deterministic.
"""

import dataclasses
import os
import sys

import numpy as np
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from duelsim.core.data import BattleConfig, Facing, Side
from duelsim.core.events.event_manager import EventManager
from duelsim.game.battle_engine import BattleEngine
from duelsim.game.entities.catalog import load_catalog
from duelsim.game.entities.combatant import CombatantProfile, CombatantState


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def battle_config():
    """Default battle configuration."""
    return BattleConfig()


@pytest.fixture
def catalog():
    """The packaged combatant roster."""
    return load_catalog()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def swordsman():
    return CombatantProfile(name="Swordsman", glyph="S", base_health=100, attack_range=40)


@pytest.fixture
def brawler():
    """A second melee profile with the same reach as the swordsman."""
    return CombatantProfile(name="Brawler", glyph="B", base_health=100, attack_range=40)


@pytest.fixture
def archer():
    return CombatantProfile(name="Archer", glyph="A", base_health=90, attack_range=70)


@pytest.fixture
def make_state(battle_config):
    """Factory for combatant states at arbitrary positions."""

    def _make_state(profile, side=Side.FIRST, x=None, y=None, **changes):
        state = CombatantState.create(profile, side, battle_config)
        position = state.position
        if x is not None:
            position = position.with_x(x)
        if y is not None:
            position = position.with_y(y)
        fields = {"position": position}
        if x is not None:
            fields["facing"] = Facing.RIGHT if side is Side.FIRST else Facing.LEFT
        fields.update(changes)
        return dataclasses.replace(state, **fields)

    return _make_state


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def engine(battle_config, fake_clock):
    """Seeded engine on a fake clock."""
    engine = BattleEngine(
        config=battle_config,
        rng=np.random.default_rng(1234),
        clock=fake_clock,
    )
    yield engine
    engine.shutdown()


@pytest.fixture
def selected_engine(engine, swordsman, brawler):
    """Engine with two evenly matched melee combatants selected."""
    assert engine.select(swordsman, brawler)
    return engine


@pytest.fixture
def run_to_active(fake_clock):
    """Start the countdown and advance the clock until the fight begins."""

    def _run_to_active(engine):
        assert engine.start(fake_clock())
        for _ in range(engine.config.countdown_seconds):
            engine.update(fake_clock.advance(engine.config.countdown_period))

    return _run_to_active
