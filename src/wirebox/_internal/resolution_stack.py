from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from wirebox.exceptions import WireboxCircularDependencyError

# Keys currently being resolved, outermost first, tagged with the owning container id.
_resolution_stack: ContextVar[tuple[tuple[int, Any], ...]] = ContextVar(
    "wirebox_resolution_stack",
    default=(),
)


@contextmanager
def resolving(owner: object, key: Any) -> Iterator[None]:
    """Track ``key`` as being resolved by ``owner`` for the duration of the block.

    Raises:
        WireboxCircularDependencyError: when ``owner`` is already resolving ``key``.

    """
    stack = _resolution_stack.get()
    entry = (id(owner), key)
    if entry in stack:
        owned = [item_key for owner_id, item_key in stack if owner_id == id(owner)]
        raise WireboxCircularDependencyError(key, owned)

    token = _resolution_stack.set((*stack, entry))
    try:
        yield
    finally:
        _resolution_stack.reset(token)


def current_stack(owner: object) -> list[Any]:
    """Return the keys ``owner`` is resolving, outermost first."""
    return [key for owner_id, key in _resolution_stack.get() if owner_id == id(owner)]


__all__ = ["current_stack", "resolving"]
