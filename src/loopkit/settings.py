"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Library-wide defaults and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import SettingsError


def _env_int(name: str, default: int | None) -> int | None:
    """
    Parse an optional integer environment variable.

    Args:
        name: Environment variable name.
        default: Value returned when the variable is unset or blank.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got '{raw}'") from exc


@dataclass(frozen=True, slots=True)
class LoopkitSettings:
    """Defaults used by helpers when no explicit argument is passed."""

    memo_key_separator: str = "--"
    uid_length: int = 10
    merge_max_depth: int | None = None

    def __post_init__(self) -> None:
        if self.uid_length < 0:
            raise SettingsError("uid_length must be >= 0")
        if self.merge_max_depth is not None and self.merge_max_depth < 0:
            raise SettingsError("merge_max_depth must be >= 0")

    @staticmethod
    def from_env() -> "LoopkitSettings":
        """Load settings from `LOOPKIT_*` environment variables."""
        return LoopkitSettings(
            memo_key_separator=os.getenv("LOOPKIT_MEMO_KEY_SEPARATOR", "--"),
            uid_length=_env_int("LOOPKIT_UID_LENGTH", 10),
            merge_max_depth=_env_int("LOOPKIT_MERGE_MAX_DEPTH", None),
        )
