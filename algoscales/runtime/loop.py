"""Main interactive event loop.

The loop owns the terminal and the only mutable reference to ``AppState``.
Messages from the scheduler and the keyboard are fed to ``update`` one at a
time; returned commands go back to the scheduler.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from ..app import update
from ..commands import Command, CommandScheduler, Services, execute
from ..input import read_key
from ..messages import KeyPressed, QuitRequested, Resized
from ..render import render, write_frame
from ..state import AppState
from ..ui_theme import UITheme
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Key-read timeouts; the short one keeps animations at ~60 fps."""

    idle_timeout_ms: int = 100
    animation_timeout_ms: int = 16


def _flush_on_quit(commands: tuple[Command, ...]) -> None:
    # Immediate background work (workspace cleanup) still runs on the way out.
    for command in commands:
        if command.delay <= 0 and not command.foreground:
            execute(command)


def run_main_loop(
    state: AppState,
    services: Services,
    scheduler: CommandScheduler,
    terminal: TerminalController,
    theme: UITheme,
    stdin_fd: int,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
    *,
    read: Callable[..., str] = read_key,
    write: Callable[[list[str]], None] = write_frame,
    terminal_size: Callable[..., object] = shutil.get_terminal_size,
    clock: Callable[[], float] = time.monotonic,
) -> AppState:
    """Run until a quit message or key arrives; return the final state."""
    last_frame: list[str] | None = None

    def dispatch(message: object) -> None:
        nonlocal state
        state, commands = update(state, message, services)
        if state.quitting:
            _flush_on_quit(commands)
            return
        scheduler.submit(commands)

    with terminal.raw_mode():
        try:
            while not state.quitting:
                term = terminal_size((80, 24))
                if (term.columns, term.lines) != (state.width, state.height):
                    dispatch(Resized(width=term.columns, height=term.lines))

                for message in scheduler.drain():
                    dispatch(message)
                    if state.quitting:
                        break
                if state.quitting:
                    break

                command = scheduler.pop_foreground()
                if command is not None:
                    scheduler.post(execute(command))
                    last_frame = None
                    continue

                frame = render(state, theme, clock())
                if frame != last_frame:
                    write(frame)
                    last_frame = frame

                timeout = timing.animation_timeout_ms if state.animation is not None else timing.idle_timeout_ms
                try:
                    key = read(stdin_fd, timeout_ms=timeout)
                except KeyboardInterrupt:
                    dispatch(QuitRequested())
                    continue
                if key:
                    dispatch(KeyPressed(key=key, at=clock()))
        finally:
            scheduler.shutdown()
    logger.info("Main loop finished")
    return state
