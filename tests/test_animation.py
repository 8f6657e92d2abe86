"""Tests for transition progress and frame reshaping."""

from __future__ import annotations

import unittest

from algoscales.animation import (
    ANIMATION_FADE_IN,
    ANIMATION_NONE,
    ANIMATION_SLIDE_LEFT,
    ANIMATION_SLIDE_RIGHT,
    advance,
    apply,
    new_animation,
)


class AnimationProgressTests(unittest.TestCase):
    def test_new_animation_starts_at_zero(self) -> None:
        animation = new_animation(ANIMATION_SLIDE_RIGHT, 0.3, now=10.0)

        self.assertEqual(animation.progress, 0.0)
        self.assertFalse(animation.complete)

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            new_animation("wipe", 0.3, now=0.0)

    def test_progress_is_monotonic_and_completes(self) -> None:
        animation = new_animation(ANIMATION_FADE_IN, 1.0, now=0.0)
        seen = []
        for now in (0.1, 0.5, 0.4, 0.9, 1.2, 0.2):
            animation = advance(animation, now)
            seen.append(animation.progress)

        self.assertEqual(seen, sorted(seen))
        self.assertTrue(all(0.0 <= value <= 1.0 for value in seen))
        self.assertTrue(animation.complete)
        self.assertEqual(animation.progress, 1.0)

    def test_advance_is_noop_once_complete(self) -> None:
        animation = advance(new_animation(ANIMATION_SLIDE_LEFT, 0.1, now=0.0), 5.0)

        self.assertIs(advance(animation, 6.0), animation)

    def test_none_and_zero_duration_are_already_complete(self) -> None:
        self.assertTrue(new_animation(ANIMATION_NONE, 0.3, now=0.0).complete)
        self.assertTrue(new_animation(ANIMATION_SLIDE_LEFT, 0.0, now=0.0).complete)


class AnimationApplyTests(unittest.TestCase):
    def test_slide_pads_by_remaining_fraction_of_width(self) -> None:
        animation = advance(new_animation(ANIMATION_SLIDE_RIGHT, 1.0, now=0.0), 0.75)

        out = apply(animation, "abc\ndef", width=20, height=5)

        self.assertEqual(out.split("\n"), [" " * 5 + "abc", " " * 5 + "def"])

    def test_slide_left_shares_geometry_and_clips_to_width(self) -> None:
        animation = advance(new_animation(ANIMATION_SLIDE_LEFT, 1.0, now=0.0), 0.5)

        out = apply(animation, "0123456789", width=10, height=5)

        self.assertEqual(out, "     01234")

    def test_fade_in_reveals_ceil_of_line_share(self) -> None:
        content = "\n".join(str(n) for n in range(10))
        animation = advance(new_animation(ANIMATION_FADE_IN, 1.0, now=0.0), 0.25)

        out = apply(animation, content, width=20, height=10)

        self.assertEqual(out.split("\n"), ["0", "1", "2"])

    def test_completed_or_missing_animation_passes_content_through(self) -> None:
        done = advance(new_animation(ANIMATION_FADE_IN, 0.1, now=0.0), 1.0)

        self.assertEqual(apply(done, "a\nb", 10, 2), "a\nb")
        self.assertEqual(apply(None, "a\nb", 10, 2), "a\nb")


if __name__ == "__main__":
    unittest.main()
