from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wirebox._internal.type_registry import TypeRegistry


@runtime_checkable
class ContainerProtocol(Protocol):
    """Operations the resolver and definitions consume from a container."""

    @property
    def types(self) -> TypeRegistry:
        """Type registry used to resolve string targets and annotations."""
        ...

    def get(self, key: Any) -> Any:
        """Return the value for ``key``.

        Raises:
            WireboxNotFoundError: when the key cannot be resolved.

        """
        ...

    def call(self, target: Any, args: Mapping[Any, Any] | None = None) -> Any:
        """Autowire and invoke ``target``."""
        ...

    def get_contextual_bindings(self, declaring_type: Any) -> Mapping[Any, Any]:
        """Return resolved contextual bindings for ``declaring_type``."""
        ...


class Factory:
    """Mark a class as a factory for another value.

    When the resolver builds an instance of a ``Factory`` subclass it resolves
    the instance's public ``create`` method with the same arguments and
    returns that result instead of the factory itself.

    Examples:
        .. code-block:: python

            class ConnectionFactory(Factory):
                def __init__(self, settings: Settings) -> None:
                    self._settings = settings

                def create(self, dsn: str) -> Connection:
                    return Connection(dsn, timeout=self._settings.timeout)

            container.define(Connection, ConnectionFactory)

    """


@runtime_checkable
class ServiceProviderProtocol(Protocol):
    """A provider that defines services lazily, when one of its keys is requested."""

    def register(self) -> None: ...

    def provides_key(self, key: Any) -> bool: ...


@runtime_checkable
class BootableServiceProviderProtocol(Protocol):
    """A provider with hooks run by ``Container.boot_services``."""

    def boot(self) -> None: ...

    def boot_deferred(self) -> None: ...


__all__ = [
    "BootableServiceProviderProtocol",
    "ContainerProtocol",
    "Factory",
    "ServiceProviderProtocol",
]
