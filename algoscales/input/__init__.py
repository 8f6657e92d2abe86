"""Keyboard input decoding for the runtime loop."""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = ["read_key", "_PENDING_BYTES", "ESC_SEQUENCE_TIMEOUT_MS"]
