from __future__ import annotations

import importlib
import warnings
from typing import Any

from pydantic_settings import BaseSettings

from wirebox._internal.type_checks import is_runtime_class


def _legacy_settings_base() -> type[Any] | None:
    # pydantic.v1 warns on import under Python 3.14+
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        try:
            module = importlib.import_module("pydantic.v1")
        except ImportError:
            return None
    base_settings = getattr(module, "BaseSettings", None)
    return base_settings if isinstance(base_settings, type) else None


SETTINGS_BASES: tuple[type[Any], ...] = tuple(
    base for base in (BaseSettings, _legacy_settings_base()) if base is not None
)


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a Pydantic settings model.

    The container defines autowired settings models as shared: they are read
    from the environment once per container and reused afterwards.

    Args:
        candidate: Object to test.

    Returns:
        ``True`` when ``candidate`` is a runtime class, is not a settings base
        itself and subclasses one; otherwise ``False``.

    """
    if not is_runtime_class(candidate) or candidate in SETTINGS_BASES:
        return False
    return issubclass(candidate, SETTINGS_BASES)


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
]
