"""
Unit tests for the ASCII text renderer.
"""

import dataclasses

import pytest

from duelsim.core.data import Side
from duelsim.core.engine.battle_state import BattleLog, BattlePhase, BattleState
from duelsim.game.entities.combatant import CombatantState
from duelsim.renderers.text_renderer import RendererConfig, TextRenderer


@pytest.fixture
def renderer(battle_config):
    return TextRenderer(battle_config=battle_config, output=lambda line: None)


@pytest.fixture
def state(battle_config, swordsman, archer):
    return BattleState(
        log=BattleLog(5),
        fighters={
            Side.FIRST: CombatantState.create(swordsman, Side.FIRST, battle_config),
            Side.SECOND: CombatantState.create(archer, Side.SECOND, battle_config),
        },
    )


class TestTextRenderer:
    """Test frame layout for each phase."""

    def test_empty_selection(self, renderer):
        lines = renderer.build_lines(BattleState(log=BattleLog()).snapshot())
        assert "Select two combatants" in lines

    def test_idle_with_selection(self, renderer, state):
        lines = renderer.build_lines(state.snapshot())
        assert lines[1] == "Swordsman vs Archer - ready"

    def test_arena_strip_positions(self, renderer, state):
        strip = renderer.build_lines(state.snapshot())[2]

        assert len(strip) == renderer.config.width
        assert strip.index("s") < strip.index("a")
        assert strip.index("s") == renderer._column_for(80)

    def test_attacking_glyph_is_uppercase(self, renderer, state):
        state.fighters[Side.FIRST] = dataclasses.replace(
            state.fighter(Side.FIRST), is_attacking=True, attack_cooldown=3
        )
        strip = renderer.build_lines(state.snapshot())[2]
        assert "S" in strip

    def test_countdown_banner(self, renderer, state):
        state.phase = BattlePhase.COUNTDOWN
        state.countdown_remaining = 3
        assert renderer.build_lines(state.snapshot())[1] == "Battle starts in 3..."

    def test_health_bars(self, renderer, state):
        state.fighters[Side.SECOND] = state.fighter(Side.SECOND).take_damage(45)
        lines = renderer.build_lines(state.snapshot())

        assert lines[3].startswith("Fighter 1:")
        assert lines[3].endswith("100/100")
        assert lines[4].endswith(" 45/90")
        assert "[" + "#" * 10 + " " * 10 + "]" in lines[4]

    def test_winner_banner_and_log(self, renderer, state):
        state.phase = BattlePhase.FINISHED
        state.winner = Side.SECOND
        state.log.append("Archer deals 20 damage to Swordsman!")

        lines = renderer.build_lines(state.snapshot())
        assert lines[1] == "Archer (Fighter 2) wins!"
        assert "Archer deals 20 damage to Swordsman!" in lines

    def test_log_hidden_when_disabled(self, battle_config, state):
        renderer = TextRenderer(battle_config, RendererConfig(show_log=False))
        state.log.append("hidden line")
        assert "hidden line" not in renderer.build_lines(state.snapshot())

    def test_render_frame_writes_lines(self, battle_config, state):
        written = []
        renderer = TextRenderer(battle_config, output=written.append)

        renderer.render_frame(state.snapshot())
        assert written == renderer.build_lines(state.snapshot())
        assert renderer.frame_count == 1

    def test_attach_redraws_on_snapshots(self, engine, swordsman, archer, battle_config):
        written = []
        TextRenderer(battle_config, output=written.append).attach(engine)

        engine.select(swordsman, archer)
        assert "Swordsman vs Archer - ready" in written
