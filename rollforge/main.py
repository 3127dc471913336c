"""
Main entry point for the RollForge dice engine.

The `rollforge` command exposes the engine from the terminal:

- stats MACRO               exact min, max and average
- roll MACRO                one roll with its per-die breakdown
- simulate MACRO [-n RUNS]  distribution chart, exact for single dice
- generate MIN MAX [-f ..]  ranked combinations for a target range
- interactive               prompt-driven console
"""

import argparse
import random
from pathlib import Path

from rollforge.core.combinations import generate_fallback
from rollforge.core.config import EngineSettings, load_settings
from rollforge.core.dice_parser import format_macro, parse
from rollforge.core.logging import log_info, setup_logging
from rollforge.core.sheets import (
    print_candidates_table,
    print_distribution_sheet,
    print_outcome_sheet,
    print_stats_sheet,
)
from rollforge.core.simulation import simulate_once
from rollforge.core.statistics import compute_stats
from rollforge.ui.cli_interface import MacroConsole


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rollforge",
        description="Dice macro statistics, simulation and combination generator.",
    )
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--locale", help="Locale used to render labels")
    parser.add_argument("--seed", type=int, help="Seed for reproducible rolls")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    stats = commands.add_parser("stats", help="Exact statistics of a macro")
    stats.add_argument("macro")

    roll = commands.add_parser("roll", help="Roll a macro once")
    roll.add_argument("macro")

    simulate = commands.add_parser("simulate", help="Distribution of a macro")
    simulate.add_argument("macro")
    simulate.add_argument("-n", "--runs", type=int, help="Number of simulated rolls")

    generate = commands.add_parser("generate", help="Combinations for a range")
    generate.add_argument("min", type=int)
    generate.add_argument("max", type=int)
    generate.add_argument(
        "-f", "--faces", nargs="+", help="Available faces, e.g. d4 d6 d2 dF"
    )
    generate.add_argument("-k", "--max-candidates", type=int)

    commands.add_parser("interactive", help="Open the interactive console")
    return parser


def run_command(
    args: argparse.Namespace,
    settings: EngineSettings,
    rng: random.Random | None,
) -> int:
    """
    Runs one parsed command.

    Args:
        args (argparse.Namespace): The parsed command line.
        settings (EngineSettings): The effective settings.
        rng (random.Random | None): Random source for rolls.

    Returns:
        int: The process exit code.

    """
    locale = settings.locale
    if args.command == "stats":
        parsed = parse(args.macro)
        print_stats_sheet(format_macro(parsed), compute_stats(parsed), locale)
    elif args.command == "roll":
        print_outcome_sheet(simulate_once(args.macro, rng), locale)
    elif args.command == "simulate":
        runs = args.runs or settings.simulation_count
        print_distribution_sheet(args.macro, runs, rng, locale)
    elif args.command == "generate":
        candidates = generate_fallback(
            args.min,
            args.max,
            args.faces or settings.available_faces,
            args.max_candidates or settings.max_candidates,
        )
        print_candidates_table(candidates, locale)
    elif args.command == "interactive":
        MacroConsole(settings, rng).run()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(
        args.config,
        locale=args.locale,
        log_level="DEBUG" if args.verbose else None,
    )
    setup_logging(settings.log_level_value)
    log_info(f"Running '{args.command}'", {"locale": settings.locale})
    rng = random.Random(args.seed) if args.seed is not None else None
    return run_command(args, settings, rng)


if __name__ == "__main__":
    raise SystemExit(main())
