from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ContainerSettings(BaseSettings):
    """Container defaults read from the environment.

    Every field maps to a ``WIREBOX_``-prefixed variable, for example
    ``WIREBOX_AUTOWIRE=1``. Arguments passed to ``Container(...)`` win over
    these values.
    """

    model_config = SettingsConfigDict(env_prefix="WIREBOX_", extra="ignore")

    autowire: bool = False
    """Define unknown class keys on demand instead of raising ``WireboxNotFoundError``."""

    shared: bool = False
    """Cache every resolved key, not only keys defined as shared."""

    detect_cycles: bool = True
    """Raise ``WireboxCircularDependencyError`` when a key is requested while it is being resolved."""


__all__ = ["ContainerSettings"]
