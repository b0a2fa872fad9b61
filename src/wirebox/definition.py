from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from typing_extensions import Self

from wirebox._internal.merge import merge_tree
from wirebox._internal.targets import reflect_target
from wirebox._internal.type_registry import TypeRegistry
from wirebox.exceptions import (
    WireboxInvalidActionNameError,
    WireboxInvalidDefinitionError,
    WireboxResolverError,
)

if TYPE_CHECKING:
    from wirebox.contracts import ContainerProtocol

PROPERTY_PREFIX = "$"
METHOD_PREFIX = "@"


@dataclass(frozen=True, slots=True)
class PropertyAssignment:
    """Assign ``value`` to attribute ``name`` of the built object.

    As a return step, read attribute ``name`` instead.
    """

    name: str
    value: Any = None


@dataclass(frozen=True, slots=True)
class MethodInvocation:
    """Autowire and call method ``name`` of the built object with ``args``."""

    name: str
    args: Any = None


SetupStep: TypeAlias = PropertyAssignment | MethodInvocation


def parse_action(action: str | SetupStep, value: Any = None) -> SetupStep:
    """Parse a ``"$attribute"`` or ``"@method"`` action into a setup step.

    Raises:
        WireboxInvalidActionNameError: when the action has neither prefix.

    """
    if isinstance(action, (PropertyAssignment, MethodInvocation)):
        return action
    if isinstance(action, str) and len(action) > 1:
        if action.startswith(PROPERTY_PREFIX):
            return PropertyAssignment(name=action[1:], value=value)
        if action.startswith(METHOD_PREFIX):
            return MethodInvocation(name=action[1:], args=value)
    msg = (
        f"The action {action!r} must be a property (prefixed with {PROPERTY_PREFIX}) "
        f"or method name (prefixed with {METHOD_PREFIX})."
    )
    raise WireboxInvalidActionNameError(msg)


class Definition:
    """Recipe for building the value of a container key.

    A definition holds the concrete to autowire (a class, a callable, a
    method pair or a registered name), parameter overrides passed to the
    resolver, setup steps run on the built object and an optional return
    step whose result replaces the built object.

    Examples:
        .. code-block:: python

            definition = (
                Definition(Mailer)
                .set_param("sender", "noreply@example.com")
                .add_setup("@set_transport", {"transport": ref("smtp")})
                .add_setup("$retries", 3)
            )
            mailer = definition.resolve(container)

    """

    def __init__(
        self,
        concrete: Any,
        args: Mapping[Any, Any] | Iterable[Any] | None = None,
        *,
        types: TypeRegistry | None = None,
    ) -> None:
        """Validate ``concrete`` and store initial parameters.

        Args:
            concrete: Class, callable, ``(class_or_instance, "method")`` pair,
                or a name / ``"Name::method"`` string known to ``types``.
            args: Initial parameters, see ``set_params``.
            types: Type registry used to validate string concretes.

        Raises:
            WireboxInvalidDefinitionError: when ``concrete`` cannot be reflected.

        """
        try:
            reflect_target(concrete, types if types is not None else TypeRegistry())
        except WireboxResolverError as error:
            msg = (
                "Factory concrete definition must be a callable or a fully qualified "
                f"class name: {error}"
            )
            raise WireboxInvalidDefinitionError(msg) from error

        self._concrete = concrete
        self._parameters: dict[Any, Any] = {}
        self._setup: list[SetupStep] = []
        self._return: SetupStep | None = None
        self._shared = False

        if args is not None:
            self.set_params(args)

    @property
    def concrete(self) -> Any:
        return self._concrete

    @property
    def parameters(self) -> Mapping[Any, Any]:
        return MappingProxyType(self._parameters)

    @property
    def setup_steps(self) -> tuple[SetupStep, ...]:
        return tuple(self._setup)

    @property
    def return_step(self) -> SetupStep | None:
        return self._return

    def resolve(
        self,
        container: ContainerProtocol,
        args: Mapping[Any, Any] | None = None,
    ) -> Any:
        """Build the value through ``container.call`` and run the setup and return steps.

        ``args`` are merged over the stored parameters; nested mappings are
        merged recursively with ``args`` winning on conflicts.

        Raises:
            WireboxResolverError: when resolving the concrete or a method step fails.

        """
        instance = container.call(self._concrete, merge_tree(args or {}, self._parameters))

        for step in self._setup:
            if isinstance(step, PropertyAssignment):
                setattr(instance, step.name, step.value)
            else:
                container.call((instance, step.name), _argument_bag(step.args))

        if self._return is None:
            return instance
        if isinstance(self._return, PropertyAssignment):
            return getattr(instance, self._return.name)
        return container.call((instance, self._return.name), _argument_bag(self._return.args))

    def set_shared(self, shared: bool = True) -> Self:  # noqa: FBT001, FBT002
        self._shared = shared
        return self

    def is_shared(self) -> bool:
        return self._shared

    def set_param(self, key: Any, value: Any = None) -> Self:
        """Store a parameter override keyed by parameter name or dependency class."""
        self._parameters[key] = value
        return self

    def set_params(self, args: Mapping[Any, Any] | Iterable[Any]) -> Self:
        """Store several parameter overrides.

        Sequence items, and mapping entries keyed by an ``int``, store the
        value itself as a key with no value. Such a key marks a parameter that
        must be supplied by the caller or by the container.
        """
        items = args.items() if isinstance(args, Mapping) else enumerate(args)
        for key, value in items:
            if isinstance(key, int) and not isinstance(key, bool):
                self.set_param(value)
            else:
                self.set_param(key, value)
        return self

    def add_setup(self, action: str | SetupStep, value: Any = None) -> Self:
        """Append a setup step: ``"$name"`` assigns ``value``, ``"@name"`` calls a method with it."""
        self._setup.append(parse_action(action, value))
        return self

    def return_(self, action: str | SetupStep, value: Any = None) -> Self:
        """Set the return step, replacing any previous one."""
        self._return = parse_action(action, value)
        return self


def factory(concrete: Any, parameters: Mapping[Any, Any] | Iterable[Any] | None = None) -> Definition:
    """Return a ``Definition`` for ``concrete``, for use in definition mappings."""
    return Definition(concrete, parameters)


def _argument_bag(value: Any) -> Mapping[Any, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        return dict(enumerate(value))
    return {0: value}


__all__ = [
    "METHOD_PREFIX",
    "PROPERTY_PREFIX",
    "Definition",
    "MethodInvocation",
    "PropertyAssignment",
    "SetupStep",
    "factory",
    "parse_action",
]
