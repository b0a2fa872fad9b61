from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Any

from wirebox._internal.signature import (
    ParameterDescriptor,
    SignatureIntrospector,
    semantic_type_name,
)
from wirebox._internal.targets import (
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    reflect_target,
)
from wirebox._internal.type_checks import has_constructor, is_instantiable
from wirebox._internal.type_registry import qualified_name
from wirebox.contracts import ContainerProtocol, Factory
from wirebox.exceptions import (
    WireboxCircularDependencyError,
    WireboxError,
    WireboxFailedResolveParameterError,
    WireboxResolverError,
)
from wirebox.reference import Reference

logger = logging.getLogger(__name__)

INJECTOR_PREFIX = "inject"
FACTORY_METHOD = "create"
_USE_DEFAULT: Any = object()


@dataclass(slots=True)
class ResolvedArguments:
    """Bound argument list for a single invocation.

    Positional-only parameters are passed positionally, every other parameter
    by keyword. Parameters that fell back to their default are omitted so the
    callee applies its own default.
    """

    args: list[Any] = field(default_factory=list)
    kwargs: dict[str, Any] = field(default_factory=dict)

    def add(self, parameter: ParameterDescriptor, value: Any) -> None:
        if parameter.kind is Parameter.POSITIONAL_ONLY:
            self.args.append(parameter.default if value is _USE_DEFAULT else value)
        elif value is not _USE_DEFAULT:
            self.kwargs[parameter.name] = value

    def check_bindable(self, target: Callable[..., Any]) -> None:
        """Raise ``TypeError`` when the arguments do not fit the signature of ``target``."""
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            return
        signature.bind(*self.args, **self.kwargs)

    def invoke(self, target: Callable[..., Any]) -> Any:
        return target(*self.args, **self.kwargs)


class Resolver:
    """Autowire and invoke classes, methods and functions.

    Every parameter of the target is bound independently, in declaration
    order, from the first source that supplies a value:

    1. ``args`` entry keyed by the parameter name (or its zero-based position);
    2. ``args`` entry keyed by the declared class (or its qualified name);
    3. contextual binding ``"$<name>"`` of the declaring class;
    4. contextual binding keyed by the declared class;
    5. ``container.get(<declared class>)``;
    6. the parameter default;
    7. ``None`` when the parameter allows it.

    Values taken from steps 1-4 pass through the provided-value check:
    ``Reference`` values are looked up in the container and the result must
    match the declared type.
    """

    def __init__(self, container: ContainerProtocol) -> None:
        self._container = container
        self._introspector = SignatureIntrospector(types=container.types)

    def resolve(self, target: Any, args: Mapping[Any, Any] | None = None) -> Any:
        """Autowire ``target`` and return the constructed value or call result.

        Args:
            target: A class, a registered class name, a ``(class_or_instance,
                "method")`` pair, a ``"Name::method"`` string, a bound method or
                any other callable.
            args: Explicit arguments keyed by parameter name, parameter position
                or dependency class.

        Raises:
            WireboxResolverError: when the target cannot be reflected,
                constructed or invoked, or one of its parameters cannot be
                bound.

        """
        bag: Mapping[Any, Any] = args if args is not None else {}
        reflected = reflect_target(target, self._container.types)

        if isinstance(reflected, ClassTarget):
            return self._resolve_class(reflected.cls, bag)
        if isinstance(reflected, MethodTarget):
            return self._resolve_method(reflected, bag)
        return self._resolve_function(reflected, bag)

    def _resolve_class(self, cls: type[Any], args: Mapping[Any, Any]) -> Any:
        name = qualified_name(cls)
        if not is_instantiable(cls):
            msg = f'Class "{name}" is not instantiable.'
            raise WireboxResolverError(msg)

        if not has_constructor(cls):
            try:
                instance = cls()
            except TypeError as error:
                msg = f"Class {name} could not be instantiated: {error}."
                raise WireboxResolverError(msg) from error
        else:
            try:
                resolved = self._resolve_parameters(
                    self._introspector.describe_constructor(cls),
                    args,
                )
            except WireboxFailedResolveParameterError as error:
                raise WireboxResolverError(str(error)) from error

            try:
                resolved.check_bindable(cls)
            except TypeError as error:
                msg = f"{name} could not be instantiated: {error}."
                raise WireboxResolverError(msg) from error
            instance = resolved.invoke(cls)

        self._resolve_injectors(instance, args)

        if isinstance(instance, Factory):
            return self._resolve_factory(instance, args)
        return instance

    def _resolve_factory(self, factory: Factory, args: Mapping[Any, Any]) -> Any:
        factory_name = qualified_name(type(factory))
        try:
            create = inspect.getattr_static(type(factory), FACTORY_METHOD)
        except AttributeError as error:
            msg = f"Factory object '{factory_name}' does not implement {FACTORY_METHOD}() method."
            raise WireboxResolverError(msg) from error

        if (
            isinstance(create, (staticmethod, classmethod))
            or not callable(create)
            or getattr(create, "__isabstractmethod__", False)
        ):
            msg = f"Factory method '{factory_name}.{FACTORY_METHOD}()' must be a public and non static."
            raise WireboxResolverError(msg)

        return self.resolve((factory, FACTORY_METHOD), args)

    def _resolve_method(self, target: MethodTarget, args: Mapping[Any, Any]) -> Any:
        if target.is_static:
            method = getattr(target.owner, target.name)
        else:
            receiver = target.receiver
            if receiver is None:
                try:
                    receiver = self._resolve_class(target.owner, {})
                except WireboxCircularDependencyError:
                    raise
                except WireboxError as error:
                    msg = (
                        f"Method {target.qualified_name}() could not be invoked because its "
                        f"declaring class could not be instantiated: {error}"
                    )
                    raise WireboxResolverError(msg) from error
            method = getattr(receiver, target.name)

        try:
            resolved = self._resolve_parameters(
                self._introspector.describe_method(method, owner=target.owner, name=target.name),
                args,
            )
        except WireboxFailedResolveParameterError as error:
            msg = f"Failed resolving method {target.qualified_name}() parameters: {error}"
            raise WireboxResolverError(msg) from error

        try:
            resolved.check_bindable(method)
        except TypeError as error:
            msg = f"Method {target.qualified_name}() could not be invoked: {error}"
            raise WireboxResolverError(msg) from error
        return resolved.invoke(method)

    def _resolve_function(self, target: FunctionTarget, args: Mapping[Any, Any]) -> Any:
        try:
            resolved = self._resolve_parameters(
                self._introspector.describe_function(target.function),
                args,
            )
        except WireboxFailedResolveParameterError as error:
            msg = f"Failed resolving function {target.qualified_name} parameters: {error}"
            raise WireboxResolverError(msg) from error

        try:
            resolved.check_bindable(target.function)
        except TypeError as error:
            msg = f"Function {target.qualified_name} could not be invoked: {error}"
            raise WireboxResolverError(msg) from error
        return resolved.invoke(target.function)

    def _resolve_parameters(
        self,
        parameters: list[ParameterDescriptor],
        args: Mapping[Any, Any],
    ) -> ResolvedArguments:
        resolved = ResolvedArguments()
        for parameter in parameters:
            try:
                value = self._resolve_parameter(parameter, args)
            except WireboxFailedResolveParameterError as error:
                msg = (
                    f"Failed resolve the #{parameter.position + 1} "
                    f"{parameter.declaring_function}() parameter: {error}"
                )
                raise WireboxFailedResolveParameterError(msg) from error
            resolved.add(parameter, value)
        return resolved

    def _resolve_parameter(  # noqa: C901
        self,
        parameter: ParameterDescriptor,
        args: Mapping[Any, Any],
    ) -> Any:
        value = _first_provided(args, parameter.name, parameter.position)
        if value is not None:
            return self._check_provided_value(parameter, value)

        if parameter.is_typed_class:
            value = _first_provided(args, parameter.annotation, parameter.type_name)
            if value is not None:
                return self._check_provided_value(parameter, value)

        bindings: Mapping[Any, Any] = {}
        if parameter.declaring_type is not None:
            bindings = self._container.get_contextual_bindings(parameter.declaring_type)

        name_key = f"${parameter.name}"
        if name_key in bindings:
            return self._check_provided_value(parameter, bindings[name_key])

        if parameter.is_typed_class:
            for type_key in (parameter.annotation, parameter.type_name):
                if type_key in bindings:
                    return self._check_provided_value(parameter, bindings[type_key])

        error: Exception | None = None
        if parameter.is_typed_class:
            try:
                return self._container.get(parameter.annotation)
            except WireboxCircularDependencyError:
                raise
            except Exception as lookup_error:  # noqa: BLE001
                logger.debug(
                    "Container lookup for parameter '%s' of %s() failed, trying fallbacks: %s",
                    parameter.name,
                    parameter.declaring_function,
                    lookup_error,
                )
                error = lookup_error

        if parameter.has_default:
            return _USE_DEFAULT

        if parameter.allows_null:
            return None

        if parameter.is_typed_class:
            msg = (
                f"Parameter '{parameter.name}' (type: {parameter.type_name}) could not be "
                "resolved automatically, it is not allowing null and no default value provided."
            )
        else:
            msg = (
                f"Parameter '{parameter.name}' (type: {parameter.type_name}) is not allowing "
                "null and no default value provided."
            )
        raise WireboxFailedResolveParameterError(msg) from error

    def _check_provided_value(self, parameter: ParameterDescriptor, value: Any) -> Any:
        if isinstance(value, Reference):
            try:
                value = self._container.get(value.target)
            except WireboxCircularDependencyError:
                raise
            except WireboxError as error:
                logger.debug(
                    "Reference to %r for parameter '%s' could not be resolved, using None: %s",
                    value.target,
                    parameter.name,
                    error,
                )
                value = None

        if parameter.annotation is None:
            return value
        if value is None and parameter.allows_null:
            return value

        actual = semantic_type_name(value)
        if actual == parameter.type_name:
            return value
        if parameter.annotation is Callable and callable(value):
            return value
        if not parameter.is_builtin and _is_instance_of(value, parameter.annotation):
            return value
        if _is_builtin_subclass_instance(value, parameter.annotation):
            return value

        expected = (
            parameter.type_name if parameter.is_builtin else f"an instance of {parameter.type_name}"
        )
        msg = f"Parameter '{parameter.name}' expects {expected}. Provided {actual}."
        raise WireboxFailedResolveParameterError(msg)

    def _resolve_injectors(self, instance: Any, args: Mapping[Any, Any]) -> None:
        for name in injector_names(type(instance)):
            self.resolve((instance, name), args)


def injector_names(cls: type[Any]) -> Iterator[str]:
    """Yield the public ``inject*`` methods of ``cls``, the class itself first, then its bases."""
    seen: set[str] = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, attribute in vars(klass).items():
            if not name.startswith(INJECTOR_PREFIX) or name in seen:
                continue
            seen.add(name)
            if getattr(attribute, "__isabstractmethod__", False):
                continue
            if isinstance(attribute, (staticmethod, classmethod)) or callable(attribute):
                yield name


def _first_provided(args: Mapping[Any, Any], *keys: Any) -> Any:
    for key in keys:
        try:
            value = args.get(key)
        except TypeError:
            # unhashable keys never match
            continue
        if value is not None:
            return value
    return None


def _is_instance_of(value: Any, cls: type[Any]) -> bool:
    try:
        return isinstance(value, cls)
    except TypeError:
        # non runtime-checkable protocols
        return cls in type(value).__mro__


def _is_builtin_subclass_instance(value: Any, annotation: Any) -> bool:
    # ``bool`` is an ``int`` subclass but never satisfies an ``int`` parameter
    if not isinstance(annotation, type) or (isinstance(value, bool) and annotation is not bool):
        return False
    return isinstance(value, annotation)


__all__ = ["FACTORY_METHOD", "INJECTOR_PREFIX", "ResolvedArguments", "Resolver", "injector_names"]
