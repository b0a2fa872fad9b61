from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from wirebox._internal.signature import callable_name
from wirebox._internal.type_checks import is_runtime_class
from wirebox._internal.type_registry import TypeRegistry, qualified_name
from wirebox.exceptions import WireboxResolverError

METHOD_SEPARATOR = "::"
_PAIR_LENGTH = 2


@dataclass(frozen=True, slots=True)
class ClassTarget:
    """Constructor-resolution target."""

    cls: type[Any]


@dataclass(frozen=True, slots=True)
class MethodTarget:
    """Method-resolution target.

    ``receiver`` is the instance to invoke the method on. It is ``None`` when
    the target was given by class and still has to be constructed, and always
    ``None`` for static and class methods.
    """

    owner: type[Any]
    name: str
    is_static: bool
    receiver: Any = None

    @property
    def qualified_name(self) -> str:
        return f"{qualified_name(self.owner)}.{self.name}"


@dataclass(frozen=True, slots=True)
class FunctionTarget:
    """Function-resolution target: functions, lambdas, partials and callable objects."""

    function: Callable[..., Any]

    @property
    def qualified_name(self) -> str:
        return callable_name(self.function)


Target: TypeAlias = ClassTarget | MethodTarget | FunctionTarget


def reflect_target(target: Any, types: TypeRegistry) -> Target:
    """Classify a resolvable target into one of the three resolution modes.

    Accepted shapes are classes, names registered in ``types``,
    ``"Name::method"`` strings, ``(class_or_instance, "method")`` pairs, bound
    methods, and any other callable.

    Raises:
        WireboxResolverError: when the target cannot be reflected.

    """
    if isinstance(target, (ClassTarget, MethodTarget, FunctionTarget)):
        return target

    if isinstance(target, str):
        if METHOD_SEPARATOR in target:
            class_name, _, method_name = target.partition(METHOD_SEPARATOR)
            return _reflect_method(_lookup_type(class_name, types), method_name)
        return ClassTarget(_lookup_type(target, types))

    if is_runtime_class(target):
        return ClassTarget(target)

    if isinstance(target, (tuple, list)):
        if len(target) != _PAIR_LENGTH or not isinstance(target[1], str):
            msg = (
                "A method target must be a (class_or_instance, method_name) pair, "
                f"got {target!r}."
            )
            raise WireboxResolverError(msg)
        subject, method_name = target
        if isinstance(subject, str):
            return _reflect_method(_lookup_type(subject, types), method_name)
        if is_runtime_class(subject):
            return _reflect_method(subject, method_name)
        return _reflect_method(type(subject), method_name, receiver=subject)

    if inspect.ismethod(target):
        bound_to = target.__self__
        if is_runtime_class(bound_to):
            return _reflect_method(bound_to, target.__name__)
        return _reflect_method(type(bound_to), target.__name__, receiver=bound_to)

    if callable(target):
        return FunctionTarget(target)

    msg = (
        "A target must be a class, a registered class name, a method pair, a "
        f"'Name::method' string or a callable. Provided {type(target).__name__}."
    )
    raise WireboxResolverError(msg)


def _lookup_type(name: str, types: TypeRegistry) -> type[Any]:
    try:
        return types.get(name)
    except LookupError as error:
        raise WireboxResolverError(str(error)) from error


def _reflect_method(owner: type[Any], name: str, receiver: Any = None) -> MethodTarget:
    try:
        attribute = inspect.getattr_static(owner, name)
    except AttributeError as error:
        msg = f"Method {qualified_name(owner)}.{name}() does not exist."
        raise WireboxResolverError(msg) from error

    is_static = isinstance(attribute, (staticmethod, classmethod))
    if not is_static and not callable(attribute):
        msg = f"{qualified_name(owner)}.{name} is not a method."
        raise WireboxResolverError(msg)

    return MethodTarget(
        owner=owner,
        name=name,
        is_static=is_static,
        receiver=None if is_static else receiver,
    )


__all__ = [
    "METHOD_SEPARATOR",
    "ClassTarget",
    "FunctionTarget",
    "MethodTarget",
    "Target",
    "reflect_target",
]
