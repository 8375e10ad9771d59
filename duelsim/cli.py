"""Command-line entry point for running a duel in the terminal."""

import argparse
import sys
from typing import Optional, Sequence

import numpy as np

from .core.data import load_battle_config
from .core.engine.battle_state import BattlePhase
from .game.battle_engine import BattleEngine
from .game.entities.catalog import get_profile, load_catalog
from .renderers.text_renderer import TextRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duelsim",
        description="Real-time duel between two combatant archetypes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  duelsim --list                              # Show the roster
  duelsim --first Swordsman --second Archer   # Watch a duel in real time
  duelsim --first Mage --second Reaper --seed 7 --fast
        """
    )

    parser.add_argument("--first", help="Combatant for the first side")
    parser.add_argument("--second", help="Combatant for the second side")
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available combatants and exit"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for damage rolls (random if omitted)"
    )
    parser.add_argument(
        "--max-seconds",
        type=float,
        default=120.0,
        help="Give up after this many seconds of battle time"
    )
    parser.add_argument("--config", help="Path to a battle YAML config")
    parser.add_argument("--catalog", help="Path to a combatant roster YAML")
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Simulate on a virtual clock instead of waiting in real time"
    )
    parser.add_argument(
        "--save-log",
        metavar="DIR",
        help="Write the engine log to DIR when the duel ends"
    )
    return parser


def run_virtual(engine: BattleEngine, max_seconds: float) -> None:
    """Drive the engine on a virtual clock advancing one tick per step."""
    now = 0.0
    engine.start(now)
    step = engine.config.tick_period
    while engine.phase in (BattlePhase.COUNTDOWN, BattlePhase.ACTIVE) and now < max_seconds:
        now += step
        engine.update(now)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_battle_config(args.config)
        catalog = load_catalog(args.catalog)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.list:
        for profile in catalog:
            print(
                f"{profile.glyph} {profile.name:<16} "
                f"HP {profile.base_health:>3}  range {profile.attack_range:g}"
            )
        return 0

    if not args.first or not args.second:
        print("Error: both --first and --second are required", file=sys.stderr)
        return 2

    try:
        first = get_profile(catalog, args.first)
        second = get_profile(catalog, args.second)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 2

    engine = BattleEngine(config=config, rng=np.random.default_rng(args.seed))
    renderer = TextRenderer(battle_config=config)
    renderer.attach(engine)

    try:
        if not engine.select(first, second):
            print("Error: a combatant cannot fight itself", file=sys.stderr)
            return 2

        if args.fast:
            run_virtual(engine, args.max_seconds)
        else:
            engine.run(max_seconds=args.max_seconds)
    except KeyboardInterrupt:
        print("\n\nDuel interrupted by user")
        return 130
    finally:
        if args.save_log:
            path = engine.log_manager.save_log_to_file(args.save_log)
            if path:
                print(f"Engine log written to {path}")
        engine.shutdown()

    winner = engine.winner
    if winner is None:
        print("No winner: time limit reached")
        return 1
    print(f"Winner: {winner.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
