from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    """Return true when candidate is a ``typing.Protocol`` definition."""
    return bool(getattr(candidate, "_is_protocol", False))


def is_instantiable(candidate: type[Any]) -> bool:
    """Return true when candidate is a concrete class that can be called to build an instance."""
    if inspect.isabstract(candidate):
        return False
    return not is_protocol_class(candidate)


def has_constructor(candidate: type[Any]) -> bool:
    """Return true when candidate declares its own ``__init__`` or ``__new__`` somewhere in its MRO."""
    return candidate.__init__ is not object.__init__ or candidate.__new__ is not object.__new__


__all__ = ["has_constructor", "is_instantiable", "is_protocol_class", "is_runtime_class"]
