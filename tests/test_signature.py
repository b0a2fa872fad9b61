"""Tests for signature introspection, type names and target reflection."""

import functools
from collections.abc import Callable
from inspect import Parameter
from typing import Annotated, Any, Optional, Union

import pytest

from tests.deferred_fakes import Accountant, Auditor, Calculator, Ledger
from tests.fakes import Clock, Greeter, Notifier, PositionalOnly, Scheduler, Storage
from wirebox._internal.signature import (
    SignatureIntrospector,
    callable_name,
    is_builtin_type,
    semantic_type_name,
    type_name,
)
from wirebox._internal.targets import ClassTarget, FunctionTarget, MethodTarget, reflect_target
from wirebox._internal.type_registry import TypeRegistry, qualified_name
from wirebox.exceptions import WireboxResolverError


@pytest.fixture()
def types() -> TypeRegistry:
    return TypeRegistry()


@pytest.fixture()
def introspector(types: TypeRegistry) -> SignatureIntrospector:
    return SignatureIntrospector(types=types)


class TestSignatureIntrospector:
    def test_describes_constructor(self, introspector: SignatureIntrospector) -> None:
        clock, interval = introspector.describe_constructor(Scheduler)

        assert clock.name == "clock"
        assert clock.annotation is Clock
        assert clock.is_typed_class
        assert clock.position == 0
        assert clock.has_default is False
        assert clock.allows_null is False
        assert clock.declaring_type is Scheduler
        assert clock.declaring_function == f"{qualified_name(Scheduler)}.__init__"

        assert interval.annotation is int
        assert interval.is_builtin
        assert interval.has_default is True
        assert interval.default == 60
        assert interval.type_name == "int"

    def test_class_without_constructor_has_no_parameters(self, introspector: SignatureIntrospector) -> None:
        assert introspector.describe_constructor(Clock) == []

    def test_optional_and_untyped_parameters(self, introspector: SignatureIntrospector) -> None:
        def target(a: Optional[str], b: Clock | None, c, d: Any, e: str = None) -> None:  # noqa: ANN001, RUF013
            pass

        a, b, c, d, e = introspector.describe_function(target)

        assert (a.annotation, a.allows_null) == (str, True)
        assert (b.annotation, b.allows_null) == (Clock, True)
        assert (c.annotation, c.allows_null, c.type_name) == (None, True, None)
        assert (d.annotation, d.allows_null) == (None, True)
        assert (e.annotation, e.allows_null) == (str, True)
        assert a.declaring_type is None

    def test_annotated_generic_and_union_parameters(self, introspector: SignatureIntrospector) -> None:
        def target(
            a: Annotated[Clock, "marker"],
            b: list[int],
            c: Union[int, str],  # noqa: UP007
            d: Union[int, str, None],  # noqa: UP007
            e: Callable[[int], str],
        ) -> None:
            pass

        a, b, c, d, e = introspector.describe_function(target)

        assert a.annotation is Clock
        assert b.annotation is list
        assert b.is_builtin
        assert (c.annotation, c.allows_null) == (None, False)
        assert (d.annotation, d.allows_null) == (None, True)
        assert e.annotation is Callable
        assert e.type_name == "callable"

    def test_unresolvable_string_annotation_uses_registry(
        self,
        types: TypeRegistry,
        introspector: SignatureIntrospector,
    ) -> None:
        def target(clock: "LaterClock", other: "Unknown") -> None:  # type: ignore[name-defined]  # noqa: F821
            pass

        types.register(Clock, "LaterClock")

        clock, other = introspector.describe_function(target)

        assert clock.annotation is Clock
        assert (other.annotation, other.allows_null) == (None, False)

    def test_one_unresolvable_hint_keeps_the_others(self, introspector: SignatureIntrospector) -> None:
        ledger, context = introspector.describe_constructor(Accountant)

        assert ledger.annotation is Ledger
        assert not ledger.allows_null
        assert (context.annotation, context.allows_null) == (None, True)

    def test_unresolvable_optional_hint_allows_null(self, introspector: SignatureIntrospector) -> None:
        ledger, context = introspector.describe_constructor(Auditor)

        assert ledger.annotation is Ledger
        assert (context.annotation, context.has_default, context.allows_null) == (None, False, True)

    def test_unresolvable_required_hint_does_not_allow_null(self, introspector: SignatureIntrospector) -> None:
        (context,) = introspector.describe_constructor(Calculator)

        assert (context.annotation, context.allows_null) == (None, False)

    def test_positional_only_kind_is_kept(self, introspector: SignatureIntrospector) -> None:
        first, second, third = introspector.describe_constructor(PositionalOnly)

        assert first.kind is Parameter.POSITIONAL_ONLY
        assert second.kind is Parameter.POSITIONAL_OR_KEYWORD
        assert third.kind is Parameter.KEYWORD_ONLY
        assert third.position == 2

    def test_describes_bound_method(self, introspector: SignatureIntrospector) -> None:
        (clock,) = introspector.describe_method(Notifier().inject_clock, owner=Notifier, name="inject_clock")

        assert clock.annotation is Clock
        assert clock.declaring_type is Notifier
        assert clock.declaring_function == f"{qualified_name(Notifier)}.inject_clock"


class TestTypeNames:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "None"),
            ("text", "str"),
            (1, "int"),
            (1.5, "float"),
            (True, "bool"),
            ([], "list"),
            ({}, "dict"),
            (Clock, "type"),
            (lambda: None, "callable"),
            (len, "callable"),
            (functools.partial(len), "callable"),
        ],
    )
    def test_semantic_type_name(self, value: Any, expected: str) -> None:
        assert semantic_type_name(value) == expected

    def test_semantic_type_name_of_instance_is_qualified(self) -> None:
        assert semantic_type_name(Clock()) == f"{Clock.__module__}.Clock"

    def test_type_name_and_builtin_detection(self) -> None:
        assert type_name(Callable) == "callable"
        assert type_name(str) == "str"
        assert type_name(Clock) == qualified_name(Clock)
        assert is_builtin_type(Callable)
        assert is_builtin_type(bytes)
        assert not is_builtin_type(Clock)

    def test_callable_name(self) -> None:
        def helper() -> None:
            pass

        assert callable_name(helper).endswith("helper")
        assert callable_name(functools.partial(len)) == "partial(len)"


class TestTypeRegistry:
    def test_register_exposes_qualified_and_bare_names(self, types: TypeRegistry) -> None:
        assert types.register(Clock) is Clock

        assert types.get(qualified_name(Clock)) is Clock
        assert types.get("Clock") is Clock
        assert "Clock" in types
        assert len(types) == 2

    def test_bare_names_are_first_come(self, types: TypeRegistry) -> None:
        other = type("Clock", (), {"__module__": "elsewhere"})

        types.register(Clock)
        types.register(other)

        assert types.find("Clock") is Clock
        assert types.find("elsewhere.Clock") is other

    def test_explicit_name_overrides_bare_name(self, types: TypeRegistry) -> None:
        types.register(Clock)
        types.register(Greeter, "Clock")

        assert types.find("Clock") is Greeter

    def test_get_raises_lookup_error(self, types: TypeRegistry) -> None:
        with pytest.raises(LookupError, match='Class "Missing" does not exist.'):
            types.get("Missing")

    def test_only_classes_can_be_registered(self, types: TypeRegistry) -> None:
        with pytest.raises(TypeError):
            types.register(len)  # type: ignore[arg-type]


class TestReflectTarget:
    def test_classes_and_names(self, types: TypeRegistry) -> None:
        types.register(Greeter)

        assert reflect_target(Greeter, types) == ClassTarget(Greeter)
        assert reflect_target("Greeter", types) == ClassTarget(Greeter)

    def test_method_shapes(self, types: TypeRegistry) -> None:
        types.register(Greeter)
        greeter = Greeter("x")

        assert reflect_target("Greeter::get_text_static", types) == MethodTarget(
            owner=Greeter,
            name="get_text_static",
            is_static=True,
        )
        assert reflect_target((Greeter, "get_text"), types) == MethodTarget(
            owner=Greeter,
            name="get_text",
            is_static=False,
        )
        assert reflect_target(["Greeter", "describe"], types).is_static
        assert reflect_target(greeter.get_text, types).receiver is greeter
        assert reflect_target((greeter, "get_text_static"), types).receiver is None

    def test_functions(self, types: TypeRegistry) -> None:
        target = reflect_target(len, types)

        assert isinstance(target, FunctionTarget)
        assert target.qualified_name == "len"

    @pytest.mark.parametrize(
        ("target", "message"),
        [
            ("Missing", 'Class "Missing" does not exist.'),
            ((Storage, "missing"), r"Storage\.missing\(\) does not exist"),
            ((Storage,), "must be a"),
            ((Storage, 1), "must be a"),
            (3.5, "Provided float"),
        ],
    )
    def test_invalid_targets(self, types: TypeRegistry, target: Any, message: str) -> None:
        with pytest.raises(WireboxResolverError, match=message):
            reflect_target(target, types)
