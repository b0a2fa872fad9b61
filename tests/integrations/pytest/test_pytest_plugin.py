from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from tests.fakes import Greeter
from wirebox import Container

pytest_plugins = ["wirebox.integrations.pytest_plugin"]


@pytest.fixture()
def wirebox_container() -> Container:
    container = Container(autowire=True)
    container.define_shared(Greeter).set_param("text", "from fixture")
    return container


def test_resolve_fixture_returns_shared_service(
    wirebox_resolve: Callable[..., Any],
    wirebox_container: Container,
) -> None:
    greeter = wirebox_resolve(Greeter)

    assert greeter.get_text() == "from fixture"
    assert greeter is wirebox_container.get(Greeter)


def test_resolve_fixture_builds_fresh_value_with_arguments(
    wirebox_resolve: Callable[..., Any],
    wirebox_container: Container,
) -> None:
    greeter = wirebox_resolve(Greeter, {"text": "explicit"})

    assert greeter.get_text() == "explicit"
    assert greeter is not wirebox_container.get(Greeter)


def test_default_container_fixture_must_be_overridden() -> None:
    from wirebox.integrations import pytest_plugin

    fixture_function = getattr(pytest_plugin.wirebox_container, "__wrapped__", None)
    if fixture_function is None:
        pytest.skip("pytest does not expose the wrapped fixture function")

    with pytest.raises(RuntimeError, match="requires overriding the 'wirebox_container' fixture"):
        fixture_function()
