"""
Unit tests for combatant profiles and per-battle state.
"""

import dataclasses

import pytest

from duelsim.core.data import Facing, Side, Vector2
from duelsim.game.entities.combatant import CombatantProfile, CombatantState


class TestCombatantProfile:

    def test_valid_profile(self, swordsman):
        assert swordsman.name == "Swordsman"
        assert swordsman.attack_range == 40

    @pytest.mark.parametrize("kwargs", [
        {"name": "", "glyph": "x", "base_health": 10, "attack_range": 10},
        {"name": "Ghost", "glyph": "x", "base_health": 0, "attack_range": 10},
        {"name": "Stump", "glyph": "x", "base_health": 10, "attack_range": 0},
    ])
    def test_invalid_profile(self, kwargs):
        with pytest.raises(ValueError):
            CombatantProfile(**kwargs)


class TestCombatantState:
    """Test CombatantState creation and transitions."""

    def test_create_first_side(self, battle_config, swordsman):
        state = CombatantState.create(swordsman, Side.FIRST, battle_config)

        assert state.position == Vector2(80, 150)
        assert state.facing is Facing.RIGHT
        assert state.health == state.max_health == 100
        assert state.alive
        assert not state.is_attacking
        assert state.attack_cooldown == 0

    def test_create_second_side_faces_left(self, battle_config, archer):
        state = CombatantState.create(archer, Side.SECOND, battle_config)
        assert state.position == Vector2(420, 150)
        assert state.facing is Facing.LEFT
        assert state.health == 90

    def test_create_with_tuning(self, battle_config, swordsman):
        state = CombatantState.create(
            swordsman, Side.FIRST, battle_config,
            max_health=150, attack_speed=2.0, move_speed=0.5,
        )
        assert state.max_health == 150
        assert state.attack_speed == 2.0
        assert state.move_speed == 0.5

    def test_take_damage(self, make_state, swordsman):
        state = make_state(swordsman).take_damage(30)
        assert state.health == 70
        assert state.alive

    def test_take_damage_clamps_at_zero(self, make_state, swordsman):
        state = make_state(swordsman).take_damage(250)
        assert state.health == 0
        assert not state.alive

    def test_take_damage_returns_copy(self, make_state, swordsman):
        state = make_state(swordsman)
        state.take_damage(10)
        assert state.health == 100

    def test_negative_damage_rejected(self, make_state, swordsman):
        with pytest.raises(ValueError):
            make_state(swordsman).take_damage(-1)

    @pytest.mark.parametrize("changes", [
        {"health": 101},
        {"health": -1},
        {"health": 0},
        {"alive": False},
        {"attack_cooldown": -1},
        {"move_speed": 0},
    ])
    def test_invariants_enforced(self, make_state, swordsman, changes):
        with pytest.raises(ValueError):
            dataclasses.replace(make_state(swordsman), **changes)

    def test_state_is_frozen(self, make_state, swordsman):
        with pytest.raises(dataclasses.FrozenInstanceError):
            make_state(swordsman).health = 1

    def test_with_max_health_refills(self, make_state, swordsman):
        state = make_state(swordsman).take_damage(40).with_max_health(150)
        assert state.health == state.max_health == 150

    def test_with_speeds_partial(self, make_state, swordsman):
        state = make_state(swordsman).with_speeds(attack_speed=2.5)
        assert state.attack_speed == 2.5
        assert state.move_speed == 1.0

    def test_display_position_adds_bob(self, make_state, swordsman):
        state = make_state(swordsman, bob=1.5)
        assert state.display_position == Vector2(80, 151.5)
        assert state.position == Vector2(80, 150)

    def test_restored_keeps_tuning(self, battle_config, make_state, swordsman):
        worn = make_state(
            swordsman, x=300, max_health=150, health=0, alive=False,
            attack_speed=2.0, is_attacking=True, attack_cooldown=4, bob=2.0,
        )
        fresh = worn.restored(battle_config)

        assert fresh.position == Vector2(80, 150)
        assert fresh.health == fresh.max_health == 150
        assert fresh.alive
        assert fresh.attack_speed == 2.0
        assert not fresh.is_attacking
        assert fresh.attack_cooldown == 0
        assert fresh.bob == 0.0

    def test_health_fraction(self, make_state, swordsman):
        assert make_state(swordsman, health=25).health_fraction == pytest.approx(0.25)
