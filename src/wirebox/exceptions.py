from __future__ import annotations

from typing import Any


class WireboxError(Exception):
    """Represent a base class for all Wirebox-specific failures.

    Catch this type when you want to handle any Wirebox error path without
    matching each concrete exception class individually.
    """


class WireboxDefinitionError(WireboxError):
    """Signal an invalid ``Definition`` recipe."""


class WireboxInvalidDefinitionError(WireboxDefinitionError):
    """Signal that a definition concrete cannot be reflected.

    Raised eagerly by ``Definition(...)`` and by ``Container.define`` /
    ``Container.override`` when the concrete is neither a callable nor a
    constructible class (or a name registered in the container's type
    registry).

    Typical fixes include passing the class object itself, registering the
    class with ``Container.register_type``, or passing a callable.
    """


class WireboxInvalidActionNameError(WireboxDefinitionError):
    """Signal a setup or return action without a ``$`` or ``@`` prefix.

    Raised by ``Definition.add_setup`` and ``Definition.return_``. Use
    ``"$name"`` to assign an attribute and ``"@name"`` to invoke a method.
    """


class WireboxResolverError(WireboxError):
    """Signal that a target could not be constructed or invoked.

    This is the umbrella failure surfaced by ``Resolver.resolve`` and
    ``Container.call``. Lower-level failures are chained as ``__cause__``
    and their messages are included in this error's message.
    """


class WireboxFailedResolveParameterError(WireboxResolverError):
    """Signal that a single parameter could not be bound.

    Raised when no binding source supplies a value, when a supplied value does
    not match the declared type, or when a required parameter has neither a
    default nor a nullable type. As the error propagates it is re-wrapped with
    the owning target and the parameter's 1-based position.

    Typical fixes include passing the value explicitly, adding a contextual
    binding with ``container.when(...).needs(...).give(...)``, registering the
    dependency, or giving the parameter a default.
    """


class WireboxCircularDependencyError(WireboxResolverError):
    """Signal a dependency cycle between container keys.

    Raised by ``Container.get`` / ``Container.make_with`` when a key is
    requested again while it is still being resolved. The ``stack`` attribute
    holds the keys being resolved, outermost first.
    """

    def __init__(self, key: Any, stack: list[Any]) -> None:
        self.key = key
        self.stack = stack
        chain = " -> ".join(_key_repr(item) for item in [*stack, key])
        super().__init__(f"Circular dependency detected: {chain}.")


class WireboxNotFoundError(WireboxError):
    """Signal that a key cannot be resolved by the container.

    Raised by ``Container.get`` / ``Container.make_with`` when the key has no
    definition, no alias and autowiring is disabled or not applicable.
    """


class WireboxDefinitionNotFoundError(WireboxNotFoundError):
    """Signal that ``Container.get_definition`` found no definition for a key."""


class WireboxAliasNotFoundError(WireboxNotFoundError):
    """Signal that ``Container.get_alias`` was called for an unknown alias."""


class WireboxContainerError(WireboxError):
    """Signal misuse of container-level APIs.

    Raised for invalid service providers and for booting services twice.
    """


class WireboxOverwriteExistingServiceError(WireboxContainerError):
    """Signal an attempt to ``define`` a key that already exists.

    Use ``Container.extend`` to change the existing definition or
    ``Container.override`` to replace it.
    """


def _key_repr(key: Any) -> str:
    return getattr(key, "__qualname__", None) or str(key)
