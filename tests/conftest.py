"""Shared pytest fixtures for wirebox tests."""

import pytest

from wirebox.container import Container
from wirebox.resolver import Resolver
from wirebox.settings import ContainerSettings


@pytest.fixture(autouse=True)
def _clear_wirebox_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``WIREBOX_*`` variables of the host from leaking into containers."""
    for name in ("WIREBOX_AUTOWIRE", "WIREBOX_SHARED", "WIREBOX_DETECT_CYCLES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def container() -> Container:
    """Default container with autowiring disabled."""
    return Container()


@pytest.fixture()
def autowire_container() -> Container:
    """Container that defines unknown classes on demand."""
    return Container(autowire=True)


@pytest.fixture()
def shared_container() -> Container:
    """Autowiring container that caches every key."""
    return Container(settings=ContainerSettings(autowire=True, shared=True))


@pytest.fixture()
def resolver(autowire_container: Container) -> Resolver:
    """Resolver bound to an autowiring container."""
    return Resolver(autowire_container)
