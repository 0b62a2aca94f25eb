"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-place deep merge and default application for nested mappings.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping, Sequence
from typing import Any, TypeVar

from .errors import MergeDepthError
from .settings import LoopkitSettings

M = TypeVar("M", bound=MutableMapping[Any, Any])

ArrayMerge = Callable[[Sequence[Any], Sequence[Any]], Any]


def concat(left: Sequence[Any], right: Sequence[Any]) -> list[Any]:
    """Default array merge: a new list with `left` items followed by `right`."""
    return [*left, *right]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def deep_merge(
    target: MutableMapping[Any, Any],
    source: Mapping[Any, Any],
    array_merge: ArrayMerge = concat,
    *,
    max_depth: int | None = None,
    settings: LoopkitSettings | None = None,
) -> None:
    """
    Merge `source` into `target` in place.

    For every key of `source`:
    - both values are sequences: `target[key] = array_merge(old, new)`
    - both values are mappings and the target one is mutable: merge
      recursively with the same `array_merge`
    - otherwise `source` wins and its value is assigned as-is

    A read-only target mapping (a `Mapping` that is not a `MutableMapping`)
    cannot be updated in place, so it is replaced by the source value and its
    target-only keys are dropped. Strings and bytes count as scalars.

    Cyclic structures are not detected and recurse until Python raises
    `RecursionError`; pass `max_depth` to fail early with `MergeDepthError`
    instead. A failed merge leaves `target` partially updated.
    """
    limit = max_depth
    if limit is None:
        limit = (settings or LoopkitSettings()).merge_max_depth
    _merge(target, source, array_merge, limit, ())


def _merge(
    target: MutableMapping[Any, Any],
    source: Mapping[Any, Any],
    array_merge: ArrayMerge,
    max_depth: int | None,
    path: tuple[Any, ...],
) -> None:
    if max_depth is not None and len(path) > max_depth:
        raise MergeDepthError(max_depth, path)
    for key, incoming in source.items():
        if key in target:
            current = target[key]
            if _is_sequence(current) and _is_sequence(incoming):
                target[key] = array_merge(current, incoming)
                continue
            if isinstance(current, MutableMapping) and isinstance(incoming, Mapping):
                _merge(current, incoming, array_merge, max_depth, (*path, key))
                continue
        target[key] = incoming


def apply_defaults(obj: M, defaults: Mapping[Any, Any]) -> M:
    """Set every key of `defaults` that `obj` lacks. Returns `obj`."""
    for key, value in defaults.items():
        if key not in obj:
            obj[key] = value
    return obj
