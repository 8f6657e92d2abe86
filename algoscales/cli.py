"""Command-line front door for algoscales.

Parses CLI options, loads persisted settings and applies one-run overrides.
Then dispatches into the interactive runtime, or prints the problem catalog
with ``--list``.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from .config import LANGUAGES, MODES, load_settings
from .errors import DataLoadError
from .logs import configure_logging
from .problems import ProblemRepository, problems_for_pattern
from .runtime import run_app
from .ui_theme import available_theme_names, resolve_theme

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algoscales",
        description="Practice algorithm patterns in the terminal, one scale at a time.",
    )
    parser.add_argument("--mode", choices=MODES, default=None, help="Session mode for this run.")
    parser.add_argument("--language", choices=LANGUAGES, default=None, help="Solution language for this run.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--problems", metavar="DIR", type=Path, default=None, help="Directory of problem JSON files.")
    parser.add_argument("--config", metavar="FILE", type=Path, default=None, help="Settings file to use.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Minimum level written to the log file.",
    )
    parser.add_argument("--list", metavar="PATTERN", nargs="?", const="", default=None, help="Print problems and exit.")
    return parser


def list_problems(problems_dir: Path | None, pattern: str) -> str:
    repository = ProblemRepository(problems_dir)
    problems = problems_for_pattern(repository.list_all(), pattern or None)
    width = max((len(problem.id) for problem in problems), default=0)
    lines = [
        f"{problem.id:<{width}}  {problem.difficulty:<6}  {problem.title}  [{', '.join(problem.patterns)}]"
        for problem in problems
    ]
    return "\n".join(lines) + ("\n" if lines else "")


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.problems is not None and not args.problems.is_dir():
        raise SystemExit(f"Problems directory not found: {args.problems}")

    if args.list is not None:
        try:
            sys.stdout.write(list_problems(args.problems, args.list))
        except DataLoadError as exc:
            raise SystemExit(str(exc)) from exc
        return

    log_path = configure_logging(args.log_level)
    settings = load_settings(args.config)
    if args.mode is not None:
        settings = replace(settings, mode=args.mode)
    if args.language is not None:
        settings = replace(settings, language=args.language)
    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    logger.debug("Logging to {}", log_path)
    run_app(settings, theme, problems_dir=args.problems, config_path=args.config)


if __name__ == "__main__":
    main()
