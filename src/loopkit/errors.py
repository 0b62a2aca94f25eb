"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by loopkit helpers.
"""

from __future__ import annotations

from typing import Any


class LoopkitError(RuntimeError):
    """Base error for loopkit failures."""


class DeferredRejectedError(LoopkitError):
    """Raised when a deferred value is rejected with a non-exception reason."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Deferred rejected: {reason!r}")
        self.reason = reason


class MergeDepthError(LoopkitError):
    """Raised when a deep merge descends past its configured depth limit."""

    def __init__(self, max_depth: int, path: tuple[str, ...]) -> None:
        joined = ".".join(str(part) for part in path) or "<root>"
        super().__init__(f"Deep merge exceeded max_depth={max_depth} at '{joined}'")
        self.max_depth = max_depth
        self.path = path


class SettingsError(LoopkitError, ValueError):
    """Raised when settings cannot be parsed from the environment."""
