from __future__ import annotations

import datetime
import decimal
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any, TypeGuard

from wirebox._internal.type_checks import is_runtime_class


@dataclass(frozen=True, slots=True)
class AutowiringPolicy:
    """Decide which classes the container may define on demand."""

    ignored_base_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
    )

    def is_eligible_concrete(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when a candidate can be defined automatically.

        Builtins, metaclasses and value types such as ``datetime`` or ``UUID``
        are never autowired. Abstract classes are eligible so that resolving
        them reports a "not instantiable" error instead of "not found".

        Args:
            candidate: Value being checked for eligibility or runtime type constraints.

        """
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if issubclass(candidate, type):
            return False
        return not issubclass(candidate, self.ignored_base_types)


__all__ = ["AutowiringPolicy"]
