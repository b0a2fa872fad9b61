from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Reference:
    """Deferred lookup of a container key.

    When a ``Reference`` is bound to a parameter (as an explicit argument, a
    definition parameter or a contextual binding), the resolver replaces it
    with ``container.get(target)`` at binding time. If the key cannot be
    resolved the parameter receives ``None``.

    Examples:
        .. code-block:: python

            container.define(Mailer).set_param("transport", ref("smtp"))

    """

    target: Any
    """Container key to resolve."""

    def get_target(self) -> Any:
        return self.target


def ref(key: Any) -> Reference:
    """Return a ``Reference`` to ``key``."""
    return Reference(key)


__all__ = ["Reference", "ref"]
