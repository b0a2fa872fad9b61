from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

if TYPE_CHECKING:
    from wirebox.container import Container


class ContextualBindingBuilder:
    """Fluent builder returned by ``Container.when``.

    Examples:
        .. code-block:: python

            container.when(ReportService).needs(Storage).give(S3Storage)
            container.when(ReportService).needs("$bucket").give_config("reports.bucket")

    """

    def __init__(self, container: Container, concretes: Iterable[Any]) -> None:
        self._container = container
        self._concretes = tuple(concretes)
        self._needs: Any = None

    def needs(self, abstract: Any) -> Self:
        """Select the dependency to bind: a class, or ``"$name"`` for a parameter name."""
        self._needs = abstract
        return self

    def give(self, implementation: Any) -> None:
        """Bind ``implementation`` for the selected dependency of every concrete.

        Classes are resolved through ``container.get``, callables through
        ``container.call``; any other value is used as is.
        """
        if self._needs is None:
            msg = "Call needs() before give() to select the dependency to bind."
            raise ValueError(msg)
        for concrete in self._concretes:
            self._container.add_contextual_binding(concrete, self._needs, implementation)

    def give_config(self, key: str, default: Any = None) -> None:
        """Bind the configuration value stored under ``key``."""
        container = self._container
        self.give(lambda: container.config(key, default))


__all__ = ["ContextualBindingBuilder"]
