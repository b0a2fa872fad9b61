from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from pydantic import BaseModel

_SEPARATOR = "."
_MISSING: Any = object()


class Repository(MutableMapping[str, Any]):
    """Key-value configuration store with dotted-key access.

    Nested mappings are addressed with dotted keys, so
    ``repository.get("db.host")`` reads ``{"db": {"host": ...}}``.

    Examples:
        .. code-block:: python

            config = Repository({"db": {"host": "localhost"}})
            config.set("db.port", 5432)
            config.get("db")  # {"host": "localhost", "port": 5432}

    """

    def __init__(self, items: Mapping[str, Any] | None = None) -> None:
        self._items: dict[str, Any] = {}
        if items is not None:
            self.merge(items)

    @classmethod
    def from_settings(cls, settings: BaseModel) -> Repository:
        """Build a repository from a pydantic model (for example a ``BaseSettings``)."""
        return cls(settings.model_dump())

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._items
        for segment in key.split(_SEPARATOR):
            if not isinstance(node, Mapping) or segment not in node:
                return default
            node = node[segment]
        return node

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(_SEPARATOR)
        node = self._items
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = value

    def forget(self, key: str) -> None:
        *parents, leaf = key.split(_SEPARATOR)
        node: Any = self._items
        for segment in parents:
            node = node.get(segment) if isinstance(node, dict) else None
        if isinstance(node, dict):
            node.pop(leaf, None)

    def merge(self, items: Mapping[str, Any] | Repository) -> None:
        """Deep-merge ``items`` into the repository, incoming values win."""
        source = items.all() if isinstance(items, Repository) else items
        _deep_update(self._items, source)

    def all(self) -> dict[str, Any]:
        return self._items

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.has(key):
            raise KeyError(key)
        self.forget(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


def _deep_update(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_update(current, value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _deep_update(target[key], value)
        else:
            target[key] = value


__all__ = ["Repository"]
