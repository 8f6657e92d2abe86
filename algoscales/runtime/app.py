"""Runtime composition: build collaborators, the terminal and the loop."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

from loguru import logger

from ..app import init
from ..commands import CommandScheduler, Services
from ..config import CACHE_DIR, DATA_DIR, Settings
from ..daily import DailyScheduler
from ..problems import ProblemRepository
from ..stats import StatsStore
from ..testrunner import TestRunner
from ..ui_theme import UITheme
from .loop import run_main_loop
from .terminal import TerminalController


def build_services(
    settings: Settings,
    *,
    problems_dir: Path | None = None,
    data_dir: Path = DATA_DIR,
    cache_dir: Path = CACHE_DIR,
    config_path: Path | None = None,
    terminal: TerminalController | None = None,
) -> Services:
    return Services(
        repository=ProblemRepository(problems_dir if problems_dir is not None else data_dir / "problems"),
        stats=StatsStore(data_dir / "stats"),
        daily=DailyScheduler(data_dir / "daily"),
        runner=TestRunner(timeout_seconds=settings.test_timeout_seconds),
        workspace_root=cache_dir / "sessions",
        config_path=config_path,
        clock=time.monotonic,
        disable_tui_mode=terminal.disable_tui_mode if terminal is not None else (lambda: None),
        enable_tui_mode=terminal.enable_tui_mode if terminal is not None else (lambda: None),
    )


def run_app(
    settings: Settings,
    theme: UITheme,
    *,
    problems_dir: Path | None = None,
    config_path: Path | None = None,
) -> None:
    """Start the interactive TUI; refuses to run without a terminal."""
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("algoscales: an interactive terminal is required")

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    services = build_services(settings, problems_dir=problems_dir, config_path=config_path, terminal=terminal)
    scheduler = CommandScheduler()
    state, commands = init(services, settings, time.monotonic())
    scheduler.submit(commands)
    logger.info("Starting algoscales (mode={}, language={}, theme={})", settings.mode, settings.language, theme.name)
    run_main_loop(state, services, scheduler, terminal, theme, stdin_fd)
