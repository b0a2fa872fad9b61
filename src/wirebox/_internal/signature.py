from __future__ import annotations

import functools
import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from wirebox._internal.type_checks import has_constructor, is_runtime_class
from wirebox._internal.type_registry import TypeRegistry, qualified_name

_MISSING_ANNOTATION: Any = object()
_UNTYPED_ANNOTATIONS: tuple[Any, ...] = (Any, object)
_CALLABLE_TYPE_NAME = "callable"
_CALLABLE_VALUE_TYPES: tuple[type[Any], ...] = (
    types.FunctionType,
    types.LambdaType,
    types.MethodType,
    types.BuiltinFunctionType,
    types.BuiltinMethodType,
    functools.partial,
)
_SKIPPED_KINDS = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """One formal parameter of a target signature."""

    name: str
    """Parameter name, unique within the signature."""
    annotation: Any
    """Declared type, or ``None`` for untyped parameters."""
    is_builtin: bool
    """Whether the declared type is a builtin kind (``str``, ``list``, ``Callable``...)."""
    position: int
    """Zero-based position within the described parameters."""
    kind: Any
    """The ``inspect.Parameter`` kind, used to pass keyword-only parameters by keyword."""
    has_default: bool
    default: Any
    allows_null: bool
    """Whether ``None`` is an acceptable value."""
    declaring_type: type[Any] | None
    """Class whose contextual bindings apply, ``None`` for free functions."""
    declaring_function: str
    """Qualified target name used in error messages."""

    @property
    def type_name(self) -> str | None:
        if self.annotation is None:
            return None
        return type_name(self.annotation)

    @property
    def is_typed_class(self) -> bool:
        """Whether the parameter declares a non-builtin class type."""
        return self.annotation is not None and not self.is_builtin


@dataclass(slots=True)
class SignatureIntrospector:
    """Describe the parameters of constructors, methods and functions."""

    types: TypeRegistry

    def describe_constructor(self, cls: type[Any]) -> list[ParameterDescriptor]:
        """Describe the parameters needed to instantiate ``cls``.

        Classes that override neither ``__init__`` nor ``__new__`` have no
        parameters.
        """
        if not has_constructor(cls):
            return []
        init = cls.__init__ if cls.__init__ is not object.__init__ else cls.__new__
        return self._describe(
            signature_source=cls,
            hints_source=init,
            declaring_type=cls,
            declaring_function=f"{qualified_name(cls)}.__init__",
        )

    def describe_method(
        self,
        method: Callable[..., Any],
        *,
        owner: type[Any],
        name: str,
    ) -> list[ParameterDescriptor]:
        """Describe a bound method, static method or class method declared on ``owner``."""
        return self._describe(
            signature_source=method,
            hints_source=method,
            declaring_type=owner,
            declaring_function=f"{qualified_name(owner)}.{name}",
        )

    def describe_function(self, function: Callable[..., Any]) -> list[ParameterDescriptor]:
        return self._describe(
            signature_source=function,
            hints_source=function,
            declaring_type=None,
            declaring_function=callable_name(function),
        )

    def _describe(
        self,
        *,
        signature_source: Callable[..., Any],
        hints_source: Callable[..., Any],
        declaring_type: type[Any] | None,
        declaring_function: str,
    ) -> list[ParameterDescriptor]:
        try:
            signature = inspect.signature(signature_source)
        except (TypeError, ValueError):
            # builtins such as ``str`` expose no introspectable signature
            return []
        parameters = [
            parameter
            for parameter in signature.parameters.values()
            if parameter.kind not in _SKIPPED_KINDS
        ]
        hints = self._resolved_type_hints(hints_source, parameters)
        descriptors: list[ParameterDescriptor] = []

        for position, parameter in enumerate(parameters):
            raw_annotation = hints.get(parameter.name, _MISSING_ANNOTATION)
            if raw_annotation is _MISSING_ANNOTATION:
                raw_annotation = parameter.annotation
            annotation, nullable = self.normalize_annotation(raw_annotation)
            has_default = parameter.default is not Parameter.empty
            default = parameter.default if has_default else None

            descriptors.append(
                ParameterDescriptor(
                    name=parameter.name,
                    annotation=annotation,
                    is_builtin=annotation is not None and is_builtin_type(annotation),
                    position=position,
                    kind=parameter.kind,
                    has_default=has_default,
                    default=default,
                    allows_null=nullable or (has_default and default is None),
                    declaring_type=declaring_type,
                    declaring_function=declaring_function,
                ),
            )

        return descriptors

    def normalize_annotation(self, annotation: Any) -> tuple[Any, bool]:
        """Reduce an annotation to ``(declared type or None, allows null)``."""
        if annotation is Parameter.empty or annotation is None or annotation is types.NoneType:
            return None, True
        if isinstance(annotation, str):
            cls = self.types.find(annotation)
            if cls is not None:
                return cls, False
            # unresolvable forward reference, only an explicit ``None`` member makes it nullable
            return None, _names_none(annotation)
        if any(annotation is untyped for untyped in _UNTYPED_ANNOTATIONS):
            return None, True

        origin = get_origin(annotation)
        if origin is Annotated:
            return self.normalize_annotation(get_args(annotation)[0])
        if origin is Union or origin is types.UnionType:
            members = get_args(annotation)
            includes_none = types.NoneType in members
            non_none = [member for member in members if member is not types.NoneType]
            if len(non_none) == 1:
                declared, nullable = self.normalize_annotation(non_none[0])
                return declared, nullable or includes_none
            return None, includes_none
        if annotation is Callable or origin is Callable:
            return Callable, False
        if origin is not None and is_runtime_class(origin):
            return origin, False
        if is_runtime_class(annotation):
            return annotation, False
        return None, True

    def _resolved_type_hints(
        self,
        provider: Callable[..., Any],
        parameters: list[Parameter],
    ) -> dict[str, Any]:
        try:
            return get_type_hints(provider, include_extras=True)
        except (AttributeError, NameError, TypeError):
            # one unresolvable annotation must not discard the others
            return _per_parameter_hints(provider, parameters)


def _per_parameter_hints(provider: Callable[..., Any], parameters: list[Parameter]) -> dict[str, Any]:
    globalns = getattr(inspect.unwrap(provider), "__globals__", {})
    hints: dict[str, Any] = {}
    for parameter in parameters:
        if not isinstance(parameter.annotation, str):
            continue
        holder = types.SimpleNamespace(__annotations__={parameter.name: parameter.annotation})
        try:
            hints.update(get_type_hints(holder, globalns=globalns, include_extras=True))
        except (AttributeError, NameError, SyntaxError, TypeError):
            continue
    return hints


def _names_none(annotation: str) -> bool:
    text = annotation.replace(" ", "")
    if text.startswith(("Optional[", "typing.Optional[")):
        return True
    return "None" in text.split("|")


def is_builtin_type(annotation: Any) -> bool:
    """Return true for ``Callable`` and for classes defined in ``builtins``."""
    if annotation is Callable:
        return True
    return is_runtime_class(annotation) and annotation.__module__ == "builtins"


def type_name(annotation: Any) -> str:
    """Return the semantic name of a declared type."""
    if annotation is Callable:
        return _CALLABLE_TYPE_NAME
    if is_runtime_class(annotation):
        return qualified_name(annotation)
    return repr(annotation)


def semantic_type_name(value: Any) -> str:
    """Classify a runtime value into the name used for compatibility checks.

    Returns ``"None"`` for ``None``, ``"callable"`` for functions, methods and
    partials, ``"type"`` for classes, and the qualified class name otherwise.
    """
    if value is None:
        return "None"
    if isinstance(value, type):
        return "type"
    if isinstance(value, _CALLABLE_VALUE_TYPES):
        return _CALLABLE_TYPE_NAME
    return qualified_name(type(value))


def callable_name(target: Any) -> str:
    name = getattr(target, "__qualname__", None)
    if name is None:
        name = getattr(target, "__name__", None)
    if name is None and isinstance(target, functools.partial):
        return f"partial({callable_name(target.func)})"
    return name if name is not None else repr(target)


__all__ = [
    "ParameterDescriptor",
    "SignatureIntrospector",
    "callable_name",
    "is_builtin_type",
    "semantic_type_name",
    "type_name",
]
