from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from wirebox.config import Repository
from wirebox.container import Container


class ServiceProvider:
    """Group related definitions and boot logic.

    Subclasses list the keys they define in ``provides`` and define them in
    ``register``. The container calls ``register`` lazily, the first time one
    of those keys is requested. ``boot`` and ``boot_deferred`` run once from
    ``Container.boot_services``; their parameters are autowired.

    Examples:
        .. code-block:: python

            class MailServiceProvider(ServiceProvider):
                provides = [Mailer]
                aliases = {"mailer": Mailer}

                def register(self) -> None:
                    self.app().define_shared(Mailer).set_param("host", "smtp.local")

            container.register_service_provider(MailServiceProvider)

    """

    provides: ClassVar[list[Any]] = []
    """Keys defined by ``register``."""

    aliases: ClassVar[dict[Any, Any]] = {}
    """Alias names added to the container when the provider is registered."""

    def __init__(self, app: Container) -> None:
        self._app = app

    def register(self) -> None:
        """Define the keys listed in ``provides``."""

    def provides_key(self, key: Any) -> bool:
        return key in self.provides

    def boot(self) -> None:
        pass

    def boot_deferred(self) -> None:
        pass

    def app(self) -> Container:
        return self._app

    def merge_config(self, config: Mapping[str, Any] | Repository) -> None:
        """Deep-merge ``config`` into the container configuration."""
        self._app.config().merge(config)


__all__ = ["ServiceProvider"]
