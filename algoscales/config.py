"""Persistent JSON settings.

Stores preferred language, default mode, per-mode timer budgets, editor
command and UI theme. Reads are defensive: malformed or missing config falls
back to defaults field by field.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir, user_data_dir, user_log_dir

APP_NAME = "algoscales"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DATA_DIR = Path(user_data_dir(APP_NAME, appauthor=False))
CACHE_DIR = Path(user_cache_dir(APP_NAME, appauthor=False))
LOG_DIR = Path(user_log_dir(APP_NAME, appauthor=False))

MODES: tuple[str, ...] = ("learn", "practice", "cram")
LANGUAGES: tuple[str, ...] = ("python", "javascript", "go")
DEFAULT_TIMER_MINUTES: dict[str, int] = {"learn": 45, "practice": 30, "cram": 15}


def _default_timer_minutes() -> dict[str, int]:
    return dict(DEFAULT_TIMER_MINUTES)


@dataclass(frozen=True)
class Settings:
    """User preferences injected once at startup."""

    language: str = "python"
    mode: str = "practice"
    timer_minutes: dict[str, int] = field(default_factory=_default_timer_minutes)
    editor: str = ""
    theme: str = "default"
    animation_ms: int = 300
    status_seconds: float = 4.0
    test_timeout_seconds: float = 10.0

    def budget_seconds(self, mode: str) -> float:
        """Return the session time budget for ``mode`` in seconds."""
        minutes = self.timer_minutes.get(mode, DEFAULT_TIMER_MINUTES.get(mode, 30))
        return float(minutes) * 60.0

    def with_timer(self, mode: str, minutes: int) -> Settings:
        timers = dict(self.timer_minutes)
        timers[mode] = max(1, min(180, int(minutes)))
        return replace(self, timer_minutes=timers)


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> str | None:
    """Persist config data as pretty-printed JSON.

    Returns an error message instead of raising so the settings screen can
    surface it on the status line.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        return f"Cannot save settings: {exc}"
    return None


def _coerce_choice(value: object, choices: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return default


def _coerce_timer_minutes(value: object) -> dict[str, int]:
    """Accept only positive integer minutes for known modes."""
    timers = _default_timer_minutes()
    if not isinstance(value, dict):
        return timers
    for mode in MODES:
        minutes = value.get(mode)
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            continue
        if minutes > 0:
            timers[mode] = minutes
    return timers


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def settings_from_dict(data: dict[str, object]) -> Settings:
    """Build ``Settings`` from raw JSON, dropping invalid fields."""
    defaults = Settings()
    editor = data.get("editor")
    theme = data.get("theme")
    animation_ms = data.get("animation_ms")
    if isinstance(animation_ms, bool) or not isinstance(animation_ms, int) or animation_ms < 0:
        animation_ms = defaults.animation_ms
    return Settings(
        language=_coerce_choice(data.get("language"), LANGUAGES, defaults.language),
        mode=_coerce_choice(data.get("mode"), MODES, defaults.mode),
        timer_minutes=_coerce_timer_minutes(data.get("timer_minutes")),
        editor=editor.strip() if isinstance(editor, str) else defaults.editor,
        theme=theme.strip() if isinstance(theme, str) and theme.strip() else defaults.theme,
        animation_ms=animation_ms,
        status_seconds=_coerce_positive_float(data.get("status_seconds"), defaults.status_seconds),
        test_timeout_seconds=_coerce_positive_float(
            data.get("test_timeout_seconds"),
            defaults.test_timeout_seconds,
        ),
    )


def settings_to_dict(settings: Settings) -> dict[str, object]:
    return {
        "language": settings.language,
        "mode": settings.mode,
        "timer_minutes": dict(settings.timer_minutes),
        "editor": settings.editor,
        "theme": settings.theme,
        "animation_ms": settings.animation_ms,
        "status_seconds": settings.status_seconds,
        "test_timeout_seconds": settings.test_timeout_seconds,
    }


def load_settings(path: Path | None = None) -> Settings:
    return settings_from_dict(load_config(path))


def save_settings(
    settings: Settings,
    path: Path | None = None,
    keys: tuple[str, ...] | None = None,
) -> str | None:
    """Merge ``settings`` into the stored config, keeping unknown keys.

    With ``keys`` only those entries are written; values overridden for one
    run stay out of the file.
    """
    config = load_config(path)
    values = settings_to_dict(settings)
    if keys is not None:
        values = {key: values[key] for key in keys}
    config.update(values)
    return save_config(config, path)
