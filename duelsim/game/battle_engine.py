"""
Battle engine orchestration.

This module owns one duel from selection to verdict. It holds the battle
state, the two cooperative timers (countdown and battle tick) and the
managers, and delegates the per-tick arithmetic to the combat resolver.

Lifecycle: IDLE -> COUNTDOWN -> ACTIVE -> FINISHED, with ``reset()``
returning to IDLE from anywhere. Illegal calls are rejected by phase guards
and leave the state untouched; observers see every change through
SnapshotUpdated events.

Several engines may share one event bus. Each engine applies its own
lifecycle events to its phase directly and stamps them with its
``battle_id``, so one duel never moves another's phase.
"""

import itertools
import time
from typing import Callable, Optional

import numpy as np

from ..core.data import BattleConfig, Side, StatKind
from ..core.engine.battle_state import BattleLog, BattlePhase, BattleSnapshot, BattleState
from ..core.engine.scheduler import PeriodicTimer
from ..core.events.event_manager import EventManager
from ..core.events.events import (
    AttackLaunched,
    BattleFinished,
    BattleReset,
    BattleStarted,
    CombatantDamaged,
    CombatantDefeated,
    CombatantsSelected,
    CountdownFinished,
    CountdownTicked,
    EventType,
    GameEvent,
    LogMessage,
    SnapshotUpdated,
    StatChanged,
)
from .ai.combat_ai import CombatAI
from .combat_resolver import TickDraws, TickOutcome, draw_tick, resolve_tick
from .entities.combatant import CombatantProfile, CombatantState
from .managers.log_manager import LogManager
from .managers.phase_manager import PhaseManager


SnapshotObserver = Callable[[BattleSnapshot], None]

_battle_ids = itertools.count(1)


class BattleEngine:
    """Runs a single two-combatant duel."""

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        rng: Optional[np.random.Generator] = None,
        event_manager: Optional[EventManager] = None,
        clock: Callable[[], float] = time.monotonic,
        ai: Optional[CombatAI] = None,
    ):
        """Initialize the engine in the IDLE phase.

        Args:
            config: Battle configuration (defaults to BattleConfig())
            rng: Random generator for damage and bob draws
            event_manager: Event bus to publish on (a private one by default).
                A bus passed in is left running by shutdown()
            clock: Monotonic time source used when ``update()`` gets no time
            ai: Combat AI shared by both combatants
        """
        self.config = config or BattleConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock
        self.battle_id = next(_battle_ids)
        self._owns_event_manager = event_manager is None
        self.event_manager = event_manager or EventManager()
        self.ai = ai or CombatAI(self.config)

        self.state = BattleState(log=BattleLog(self.config.log_capacity))

        self.log_manager = LogManager(event_manager=self.event_manager)
        if self._owns_event_manager:
            self.event_manager.set_error_handler(self.log_manager.error)
        self.phase_manager = PhaseManager(self.state, self.event_manager, battle_id=self.battle_id)
        self._observer_handlers: list[Callable[[SnapshotUpdated], None]] = []

        self._countdown_timer = PeriodicTimer(
            self.config.countdown_period, self._on_countdown_timer, name="countdown"
        )
        self._battle_timer = PeriodicTimer(
            self.config.tick_period, self._on_battle_timer, name="battle"
        )
        self._now: float = 0.0
        self._in_tick = False
        self._closed = False

    def __enter__(self) -> "BattleEngine":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()

    # Read-only views

    @property
    def phase(self) -> BattlePhase:
        return self.state.phase

    @property
    def countdown_remaining(self) -> int:
        return self.state.countdown_remaining

    @property
    def winner(self) -> Optional[CombatantProfile]:
        return self.state.winner_profile()

    @property
    def battle_log(self) -> tuple[str, ...]:
        return self.state.log.entries()

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def timers_active(self) -> bool:
        return self._countdown_timer.is_active or self._battle_timer.is_active

    def fighter(self, side: Side) -> CombatantState:
        return self.state.fighter(side)

    def snapshot(self) -> BattleSnapshot:
        return self.state.snapshot()

    def add_observer(self, observer: SnapshotObserver) -> None:
        """Call ``observer`` with every snapshot this engine publishes."""
        def handler(event: SnapshotUpdated) -> None:
            if event.battle_id == self.battle_id:
                observer(event.snapshot)

        self._observer_handlers.append(handler)
        self.event_manager.subscribe(
            EventType.SNAPSHOT_UPDATED,
            handler,
            subscriber_name=getattr(observer, "__name__", "observer"),
        )

    # Setup (IDLE only)

    def select(self, first: CombatantProfile, second: CombatantProfile) -> bool:
        """Place two combatants at opposite arena edges.

        Returns:
            True if the selection was applied
        """
        if not self._require_phase(BattlePhase.IDLE, "select"):
            return False
        if first == second:
            self._emit_log(
                f"Cannot pit {first.name} against itself", level="WARNING"
            )
            return False

        self.state.fighters = {
            Side.FIRST: CombatantState.create(first, Side.FIRST, self.config),
            Side.SECOND: CombatantState.create(second, Side.SECOND, self.config),
        }
        self.state.winner = None
        self.state.log.clear()

        self.event_manager.publish(
            CombatantsSelected(tick=self.state.tick, first=first, second=second),
            source="BattleEngine",
        )
        self._emit_log(f"Selected {first.name} vs {second.name}")
        self._publish_snapshot()
        return True

    def set_health(self, side: Side, value: float) -> bool:
        return self._apply_stat(side, StatKind.HEALTH, value)

    def set_attack_speed(self, side: Side, value: float) -> bool:
        return self._apply_stat(side, StatKind.ATTACK_SPEED, value)

    def set_move_speed(self, side: Side, value: float) -> bool:
        return self._apply_stat(side, StatKind.MOVE_SPEED, value)

    def _apply_stat(self, side: Side, kind: StatKind, value: float) -> bool:
        """Retune one stat of a selected combatant.

        Raises:
            KeyError: If ``side`` is not a Side
            ValueError: If ``value`` is outside the stat's range or step grid
        """
        if not isinstance(side, Side):
            raise KeyError(f"Unknown side: {side!r}")
        stat_range = self.config.stat_range(kind)
        if not stat_range.accepts(value):
            raise ValueError(
                f"{kind.value} must be within [{stat_range.minimum}, {stat_range.maximum}] "
                f"in steps of {stat_range.step}, got {value}"
            )
        if not self._require_phase(BattlePhase.IDLE, f"set {kind.value}"):
            return False
        if side not in self.state.fighters:
            self._emit_log(
                f"Cannot set {kind.value} for {side.label}: no combatant selected",
                level="WARNING",
            )
            return False

        fighter = self.state.fighters[side]
        if kind is StatKind.HEALTH:
            fighter = fighter.with_max_health(int(round(value)))
        elif kind is StatKind.ATTACK_SPEED:
            fighter = fighter.with_speeds(attack_speed=round(value, 2))
        else:
            fighter = fighter.with_speeds(move_speed=round(value, 2))
        self.state.fighters[side] = fighter

        self.event_manager.publish(
            StatChanged(tick=self.state.tick, side=side, stat=kind, value=value),
            source="BattleEngine",
        )
        self._emit_log(f"{fighter.name} {kind.value} set to {value}")
        self._publish_snapshot()
        return True

    # Lifecycle

    def start(self, now: Optional[float] = None) -> bool:
        """Begin the pre-fight countdown.

        Returns:
            True if the countdown started
        """
        if not self._require_phase(BattlePhase.IDLE, "start"):
            return False
        if not self.state.has_both_fighters:
            self._emit_log("Cannot start: two combatants must be selected", level="WARNING")
            return False

        self._now = self._resolve_now(now)
        self.state.countdown_remaining = self.config.countdown_seconds
        self._announce(
            BattleStarted(
                tick=self.state.tick,
                countdown_seconds=self.config.countdown_seconds,
                battle_id=self.battle_id,
            )
        )
        self._emit_log(f"Countdown started ({self.config.countdown_seconds}s)", category="TIMER")

        if self.state.countdown_remaining <= 0:
            self._begin_active()
        else:
            self._countdown_timer.start(self._now)
        self._publish_snapshot()
        return True

    def countdown_tick(self) -> bool:
        """Advance the countdown by one second.

        Returns:
            True if the countdown advanced
        """
        if self.state.phase != BattlePhase.COUNTDOWN:
            return False

        self.state.countdown_remaining = max(0, self.state.countdown_remaining - 1)
        self.event_manager.publish(
            CountdownTicked(tick=self.state.tick, remaining=self.state.countdown_remaining),
            source="BattleEngine",
        )

        if self.state.countdown_remaining == 0:
            self._begin_active()
        self._publish_snapshot()
        return True

    def _begin_active(self) -> None:
        self._countdown_timer.stop()
        self._announce(CountdownFinished(tick=self.state.tick, battle_id=self.battle_id))
        self._battle_timer.start(self._now)
        self._emit_log("Fight!", category="BATTLE", level="INFO")

    def tick(self, draws: Optional[TickDraws] = None) -> Optional[TickOutcome]:
        """Run one battle tick.

        Args:
            draws: Random values to use; drawn from ``rng`` when omitted

        Returns:
            The tick's outcome, or None if no tick ran (wrong phase or re-entry)
        """
        if self.state.phase != BattlePhase.ACTIVE or self._in_tick:
            return None

        self._in_tick = True
        try:
            if draws is None:
                draws = draw_tick(self.rng, self.config)

            outcome = resolve_tick(
                self.state.fighter(Side.FIRST),
                self.state.fighter(Side.SECOND),
                draws,
                self.config,
                ai=self.ai,
            )

            self.state.tick += 1
            self.state.fighters = {Side.FIRST: outcome.first, Side.SECOND: outcome.second}
            self.state.log.extend(outcome.log_lines)
            self._publish_tick_events(outcome)

            if outcome.winner is not None:
                self._finish(outcome.winner)

            self._publish_snapshot()
            return outcome
        finally:
            self._in_tick = False

    def _publish_tick_events(self, outcome: TickOutcome) -> None:
        for side in outcome.attacks_launched:
            self.event_manager.publish(
                AttackLaunched(
                    tick=self.state.tick,
                    side=side,
                    cooldown=outcome.fighter(side).attack_cooldown,
                ),
                source="BattleEngine",
            )
        for hit in outcome.hits:
            self.event_manager.publish(
                CombatantDamaged(
                    tick=self.state.tick,
                    attacker=hit.attacker,
                    target=hit.target,
                    damage=hit.damage,
                    health_remaining=hit.health_remaining,
                ),
                source="BattleEngine",
            )
        for line in outcome.log_lines:
            self._emit_log(line, category="BATTLE", level="INFO")

    def _finish(self, winner: Side) -> None:
        """Declare ``winner`` and stop the tick loop."""
        self._battle_timer.stop()
        self.state.winner = winner

        loser = self.state.fighter(winner.opponent)
        if not loser.alive:
            self.event_manager.publish(
                CombatantDefeated(tick=self.state.tick, side=loser.side, name=loser.name),
                source="BattleEngine",
            )

        winner_name = self.state.fighter(winner).name
        self._announce(
            BattleFinished(
                tick=self.state.tick,
                winner=winner,
                winner_name=winner_name,
                battle_id=self.battle_id,
            )
        )
        self._emit_log(
            f"{winner_name} wins after {self.state.tick} ticks", category="BATTLE", level="INFO"
        )

    def reset(self) -> None:
        """Stop any running battle and return to IDLE with fresh combatants.

        The selection and any stat tuning are kept. Does nothing once the
        engine has been shut down.
        """
        if self._closed:
            return
        self._countdown_timer.stop()
        self._battle_timer.stop()

        previous_phase = self.state.phase
        self.state.log.clear()
        self.state.fighters = {
            side: fighter.restored(self.config)
            for side, fighter in self.state.fighters.items()
        }
        self.state.winner = None
        self.state.countdown_remaining = 0
        self.state.tick = 0

        self._announce(
            BattleReset(tick=0, previous_phase=previous_phase, battle_id=self.battle_id)
        )
        self._emit_log(f"Battle reset from {previous_phase.name}")
        self._publish_snapshot()

    # Scheduling

    def update(self, now: Optional[float] = None) -> None:
        """Poll both timers and deliver queued events.

        Args:
            now: Current monotonic time; read from ``clock`` when omitted
        """
        if self._closed:
            return

        self._now = self._resolve_now(now)
        self._countdown_timer.poll(self._now)
        self._battle_timer.poll(self._now)
        self.event_manager.process_events()

    def run(self, max_seconds: Optional[float] = None, frame_time: float = 0.01) -> BattleSnapshot:
        """Drive the battle in real time until it finishes.

        Starts the countdown first if the engine is IDLE with two combatants.

        Args:
            max_seconds: Give up after this much wall time (None for no limit)
            frame_time: Sleep between polls

        Returns:
            Snapshot at the moment the loop stopped
        """
        if self.state.phase == BattlePhase.IDLE:
            self.start()

        deadline = None if max_seconds is None else self.clock() + max_seconds
        while not self._closed and self.state.phase in (BattlePhase.COUNTDOWN, BattlePhase.ACTIVE):
            if deadline is not None and self.clock() >= deadline:
                self._emit_log("Run loop deadline reached", category="TIMER", level="WARNING")
                break
            self.update()
            time.sleep(frame_time)

        self.event_manager.process_events()
        return self.snapshot()

    def shutdown(self) -> None:
        """Cancel both timers and release the event bus.

        A private bus is torn down. On a shared bus only this engine's
        subscriptions are removed.
        """
        if self._closed:
            return
        self._countdown_timer.stop()
        self._battle_timer.stop()
        self._closed = True
        self._emit_log("Battle engine shut down")
        self.event_manager.process_events()
        if self._owns_event_manager:
            self.event_manager.shutdown()
            return
        self.log_manager.detach()
        for handler in self._observer_handlers:
            self.event_manager.unsubscribe(EventType.SNAPSHOT_UPDATED, handler)
        self._observer_handlers.clear()

    def _on_countdown_timer(self) -> None:
        self.countdown_tick()

    def _on_battle_timer(self) -> None:
        self.tick()

    # Helpers

    def _resolve_now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def _require_phase(self, phase: BattlePhase, action: str) -> bool:
        if self._closed:
            self._emit_log(f"Rejected {action}: engine is shut down", level="WARNING")
            return False
        if self.state.phase != phase:
            self._emit_log(
                f"Rejected {action} during {self.state.phase.name}", level="WARNING"
            )
            return False
        return True

    def _announce(self, event: GameEvent) -> None:
        """Publish a lifecycle event and apply it to this engine's phase."""
        self.event_manager.publish(event, source="BattleEngine")
        self.phase_manager.handle_event(event)

    def _publish_snapshot(self) -> None:
        self.event_manager.publish(
            SnapshotUpdated(
                tick=self.state.tick,
                snapshot=self.state.snapshot(),
                battle_id=self.battle_id,
            ),
            source="BattleEngine",
        )
        self.event_manager.process_events()

    def _emit_log(
        self, message: str, category: str = "SYSTEM", level: str = "INFO"
    ) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                tick=self.state.tick,
                message=message,
                category=category,
                level=level,
                source="BattleEngine",
            ),
            source="BattleEngine",
        )
