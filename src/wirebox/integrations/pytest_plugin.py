"""Pytest fixtures for tests that build services from a wirebox container.

Enable the plugin with ``pytest_plugins = ["wirebox.integrations.pytest_plugin"]``
and override the ``wirebox_container`` fixture.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from wirebox.container import Container


@pytest.fixture()
def wirebox_container() -> Container:
    """Fixture hook for the plugin-managed test container.

    Users must override this fixture in their own test suite to provide
    definitions for the services under test.

    """
    msg = (
        "The wirebox pytest plugin requires overriding the 'wirebox_container' fixture in your "
        "test suite. Define @pytest.fixture() def wirebox_container() -> Container: ... "
        "and return a configured container."
    )
    raise RuntimeError(msg)


@pytest.fixture()
def wirebox_resolve(wirebox_container: Container) -> Callable[..., Any]:
    """Return a helper that builds a key from ``wirebox_container``.

    ``wirebox_resolve(key)`` returns ``container.get(key)``;
    ``wirebox_resolve(key, {"param": value})`` builds a fresh value with
    ``container.make_with``.

    """

    def resolve(key: Any, args: Mapping[Any, Any] | None = None) -> Any:
        if args is None:
            return wirebox_container.get(key)
        return wirebox_container.make_with(key, args)

    return resolve


__all__ = ["wirebox_container", "wirebox_resolve"]
