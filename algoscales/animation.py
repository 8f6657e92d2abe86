"""Screen transition animations.

An ``Animation`` is a pure function of elapsed time: ``advance`` derives
progress from a timestamp and ``apply`` reshapes a rendered frame. Nothing
here gates input handling.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .ansi import clip_ansi_line

ANIMATION_NONE = "none"
ANIMATION_SLIDE_LEFT = "slide_left"
ANIMATION_SLIDE_RIGHT = "slide_right"
ANIMATION_FADE_IN = "fade_in"
ANIMATION_KINDS: tuple[str, ...] = (
    ANIMATION_NONE,
    ANIMATION_SLIDE_LEFT,
    ANIMATION_SLIDE_RIGHT,
    ANIMATION_FADE_IN,
)
FRAME_INTERVAL_SECONDS = 0.016


@dataclass(frozen=True)
class Animation:
    kind: str
    started_at: float
    duration: float
    progress: float = 0.0
    complete: bool = False


def new_animation(kind: str, duration: float, now: float) -> Animation:
    """Start a transition at ``now``; zero duration completes immediately."""
    if kind not in ANIMATION_KINDS:
        raise ValueError(f"unknown animation kind: {kind!r}")
    if kind == ANIMATION_NONE or duration <= 0:
        return Animation(kind=kind, started_at=now, duration=max(0.0, duration), progress=1.0, complete=True)
    return Animation(kind=kind, started_at=now, duration=duration)


def advance(animation: Animation, now: float) -> Animation:
    """Recompute progress for ``now``.

    Progress is clamped to ``[0, 1]`` and never moves backwards, so an
    out-of-order timestamp cannot rewind a transition.
    """
    if animation.complete:
        return animation
    elapsed = max(0.0, now - animation.started_at)
    progress = max(animation.progress, min(1.0, elapsed / animation.duration))
    if progress >= 1.0:
        return replace(animation, progress=1.0, complete=True)
    return replace(animation, progress=progress)


def _slide(lines: list[str], width: int, offset: int) -> list[str]:
    padding = " " * offset
    if width <= 0:
        return [padding + line for line in lines]
    return [clip_ansi_line(padding + line, width) for line in lines]


def apply(animation: Animation | None, content: str, width: int, height: int) -> str:
    """Reshape ``content`` for the animation's current progress.

    Slides indent every line by ``width * (1 - progress)`` columns. Fade-in
    reveals ``ceil(line_count * progress)`` lines from the top. A finished
    animation, or kind ``none``, returns ``content`` unchanged.
    """
    if animation is None or animation.complete or animation.kind == ANIMATION_NONE:
        return content

    lines = content.split("\n")
    if animation.kind in {ANIMATION_SLIDE_LEFT, ANIMATION_SLIDE_RIGHT}:
        offset = int(max(0, width) * (1.0 - animation.progress))
        return "\n".join(_slide(lines, width, offset))
    if animation.kind == ANIMATION_FADE_IN:
        visible = math.ceil(len(lines) * animation.progress - 1e-9)
        return "\n".join(lines[: max(0, visible)])
    return content
