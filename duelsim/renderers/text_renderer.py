"""Plain-text renderer for the duel.

Draws a BattleSnapshot as a block of lines: a status banner, a one-row arena
strip with each combatant's initial, two health bars and the battle log.
Attached to an engine it redraws on every published snapshot.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from ..core.data import BattleConfig
from ..core.engine.battle_state import BattlePhase, BattleSnapshot
from ..game.entities.combatant import CombatantState


@dataclass
class RendererConfig:
    width: int = 60
    health_bar_width: int = 20
    show_log: bool = True


class TextRenderer:
    """ASCII renderer: one arena strip, two health bars and the battle log."""

    def __init__(
        self,
        battle_config: Optional[BattleConfig] = None,
        config: Optional[RendererConfig] = None,
        output: Callable[[str], None] = print,
    ):
        self.battle_config = battle_config or BattleConfig()
        self.config = config or RendererConfig()
        self.output = output
        self._frame_count = 0

        self.banner_symbols = {
            "rule": "=",
            "track": ".",
            "clash": "X",
        }

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def render_frame(self, snapshot: BattleSnapshot) -> None:
        self._frame_count += 1
        for line in self.build_lines(snapshot):
            self.output(line)

    def build_lines(self, snapshot: BattleSnapshot) -> list[str]:
        width = self.config.width
        lines = [self.banner_symbols["rule"] * width, self._status_line(snapshot)]

        if snapshot.first is not None and snapshot.second is not None:
            lines.append(self._arena_strip(snapshot.first, snapshot.second))
            lines.append(self._health_line(snapshot.first))
            lines.append(self._health_line(snapshot.second))

        if self.config.show_log and snapshot.log:
            lines.append("-" * width)
            lines.extend(entry[:width] for entry in snapshot.log)

        lines.append(self.banner_symbols["rule"] * width)
        return lines

    def _status_line(self, snapshot: BattleSnapshot) -> str:
        if snapshot.phase == BattlePhase.IDLE:
            if snapshot.first is None:
                return "Select two combatants"
            return f"{snapshot.first.name} vs {snapshot.second.name} - ready"
        if snapshot.phase == BattlePhase.COUNTDOWN:
            return f"Battle starts in {snapshot.countdown_remaining}..."
        if snapshot.phase == BattlePhase.ACTIVE:
            return f"Fight! (tick {snapshot.tick})"

        winner = snapshot.winner_state
        if winner is None:
            return "Battle over"
        return f"{winner.name} ({winner.side.label}) wins!"

    def _column_for(self, x: float) -> int:
        """Map an arena x coordinate onto a strip column."""
        columns = self.config.width
        scaled = int(x / self.battle_config.arena_width * columns)
        return max(0, min(columns - 1, scaled))

    def _arena_strip(self, first: CombatantState, second: CombatantState) -> str:
        strip = [self.banner_symbols["track"]] * self.config.width
        first_col = self._column_for(first.display_position.x)
        second_col = self._column_for(second.display_position.x)

        strip[first_col] = self._glyph_for(first)
        if second_col == first_col:
            strip[second_col] = self.banner_symbols["clash"]
        else:
            strip[second_col] = self._glyph_for(second)
        return "".join(strip)

    @staticmethod
    def _glyph_for(fighter: CombatantState) -> str:
        if not fighter.alive:
            return "_"
        # Profile glyphs are emoji of uneven width, so the strip uses initials
        initial = fighter.name[0]
        return initial.upper() if fighter.is_attacking else initial.lower()

    def _health_line(self, fighter: CombatantState) -> str:
        bar_width = self.config.health_bar_width
        filled = int(round(fighter.health_fraction * bar_width))
        bar = "#" * filled + " " * (bar_width - filled)
        label = f"{fighter.side.label}: {fighter.profile.glyph} {fighter.name}"
        return f"{label:<28} [{bar}] {fighter.health:>3}/{fighter.max_health}"

    def attach(self, engine) -> None:
        """Redraw on every snapshot the engine publishes."""
        engine.add_observer(self.render_frame)

