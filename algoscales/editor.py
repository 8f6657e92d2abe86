"""External editor hand-off for session code.

The caller supplies callbacks that leave and re-enter raw/alternate-screen
TUI mode around the editor process. The scratch file is removed on every
exit path.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from .errors import EditorError

LANGUAGE_EXTENSIONS: dict[str, str] = {
    "python": "py",
    "javascript": "js",
    "typescript": "ts",
    "java": "java",
    "cpp": "cpp",
    "rust": "rs",
    "go": "go",
}
FALLBACK_EDITOR = "vi"


def file_extension(language: str) -> str:
    return LANGUAGE_EXTENSIONS.get(language, "txt")


def scratch_path(workspace: Path, language: str) -> Path:
    """Session-scoped scratch file: ``<workspace>/solution.<ext>``."""
    return workspace / f"solution.{file_extension(language)}"


def resolve_editor_command(configured: str = "") -> list[str]:
    """Configured command, then ``$VISUAL``, ``$EDITOR``, then ``vi``."""
    for candidate in (configured, os.environ.get("VISUAL", ""), os.environ.get("EDITOR", "")):
        candidate = candidate.strip()
        if not candidate:
            continue
        try:
            cmd = shlex.split(candidate)
        except ValueError as exc:
            raise EditorError(f"Cannot parse editor command {candidate!r}: {exc}") from exc
        if cmd:
            return cmd
    return [FALLBACK_EDITOR]


def edit_code(
    code: str,
    target: Path,
    editor_cmd: list[str],
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> str:
    """Write ``code`` to ``target``, edit it, and return the saved contents.

    Raises ``EditorError`` when the editor cannot start or exits non-zero;
    the caller keeps its previous code in that case.
    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(code, encoding="utf-8")
    except OSError as exc:
        raise EditorError(f"Cannot write {target}: {exc}") from exc

    try:
        logger.info("Opening editor {} for {}", editor_cmd, target)
        disable_tui_mode()
        try:
            completed = run([*editor_cmd, str(target)], check=False)
        except OSError as exc:
            raise EditorError(f"Failed to launch editor: {exc}") from exc
        finally:
            enable_tui_mode()

        logger.info("Editor exited with status {}", completed.returncode)
        if completed.returncode != 0:
            raise EditorError(
                f"Editor exited with status {completed.returncode}; changes were not loaded",
                exit_status=completed.returncode,
            )
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise EditorError(f"Cannot read {target}: {exc}") from exc
    finally:
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove scratch file {}: {}", target, exc)
