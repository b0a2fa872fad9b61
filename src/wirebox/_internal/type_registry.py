from __future__ import annotations

from typing import Any

from wirebox._internal.type_checks import is_runtime_class


class TypeRegistry:
    """Map type names to classes for string-keyed targets and annotations.

    Every class is reachable by its fully qualified name
    (``module.QualName``) and by its bare ``__qualname__``. Bare names are
    first-come: registering a second class with the same bare name keeps the
    first one, the fully qualified names stay unique.
    """

    def __init__(self) -> None:
        self._types: dict[str, type[Any]] = {}

    def register(self, cls: type[Any], name: str | None = None) -> type[Any]:
        """Register ``cls`` under its names, plus ``name`` when given.

        Returns ``cls`` so the method can be used as a class decorator.
        """
        if not is_runtime_class(cls):
            msg = f"Only classes can be registered as types, got {cls!r}."
            raise TypeError(msg)

        self._types[qualified_name(cls)] = cls
        self._types.setdefault(cls.__qualname__, cls)
        if name is not None:
            self._types[name] = cls
        return cls

    def find(self, name: str) -> type[Any] | None:
        return self._types.get(name)

    def get(self, name: str) -> type[Any]:
        """Return the class registered under ``name``.

        Raises:
            LookupError: when no class is registered under ``name``.

        """
        cls = self._types.get(name)
        if cls is None:
            msg = f'Class "{name}" does not exist.'
            raise LookupError(msg)
        return cls

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


def qualified_name(cls: type[Any]) -> str:
    """Return ``module.QualName`` for classes outside ``builtins``, ``QualName`` otherwise."""
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


__all__ = ["TypeRegistry", "qualified_name"]
