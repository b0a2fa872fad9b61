from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def merge_tree(primary: Mapping[Any, Any], fallback: Mapping[Any, Any]) -> dict[Any, Any]:
    """Recursively merge two mappings.

    Keys missing from ``primary`` are taken from ``fallback``. When both sides
    hold a mapping under the same key the two are merged recursively,
    otherwise the ``primary`` value wins.
    """
    merged: dict[Any, Any] = {**fallback, **primary}
    for key, value in primary.items():
        if key not in fallback:
            continue
        other = fallback[key]
        if isinstance(value, Mapping) and isinstance(other, Mapping):
            merged[key] = merge_tree(value, other)
    return merged


__all__ = ["merge_tree"]
