"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Small standalone helpers.
"""

from __future__ import annotations

import random
import string
from typing import Any

from .settings import LoopkitSettings

_UID_ALPHABET = string.digits + string.ascii_lowercase


def uid(n: int | None = None, *, settings: LoopkitSettings | None = None) -> str:
    """Return a random base-36 string of length `n` (default 10)."""
    length = n if n is not None else (settings or LoopkitSettings()).uid_length
    if length < 0:
        raise ValueError("uid length must be >= 0")
    return "".join(random.choices(_UID_ALPHABET, k=length))


def is_one_of(x: Any, *values: Any) -> bool:
    return any(x == value for value in values)
