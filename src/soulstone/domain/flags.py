"""Named story flags shared by every subsystem."""
from __future__ import annotations

import logging
from typing import Dict, Mapping

logger = logging.getLogger(__name__)

FLAG_TRUE = "true"
FLAG_FALSE = "false"
FLAG_ACTIVE = "active"
FLAG_CONCLUDED = "concluded"

FLAG_VALUES: tuple[str, ...] = (FLAG_TRUE, FLAG_FALSE, FLAG_ACTIVE, FLAG_CONCLUDED)

DEAD_FLAG = "Dead"
LOCATION_FLAG_PREFIX = "location_"


def location_flag(location_id: str) -> str:
    """Return the canonical reveal flag for a location."""
    return f"{LOCATION_FLAG_PREFIX}{location_id}"


def is_valid_flag_value(value: object) -> bool:
    return isinstance(value, str) and value in FLAG_VALUES


class FlagStore:
    """
    Mapping of flag name to sentinel value.

    An absent flag reads as "false" for gating, but stays distinguishable
    from an explicit "false" through `get`. Flags are never deleted.
    """

    __slots__ = ("_values",)

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = {}
        if initial:
            for name, value in initial.items():
                self.set(name, value)

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Flag name must be a non-empty string.")
        if not is_valid_flag_value(value):
            raise ValueError(f"Unrecognized value {value!r} for flag '{name}'.")
        previous = self._values.get(name)
        self._values[name] = value
        if previous != value:
            logger.debug("Flag %s: %s -> %s", name, previous, value)

    def is_true(self, name: str) -> bool:
        return self._values.get(name) == FLAG_TRUE

    def is_false(self, name: str) -> bool:
        """Return True when the flag is absent or explicitly "false"."""
        return self._values.get(name, FLAG_FALSE) == FLAG_FALSE

    def is_revealing(self, name: str) -> bool:
        """Return True when the flag is present with any value other than "false"."""
        value = self._values.get(name)
        return value is not None and value != FLAG_FALSE

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def snapshot(self) -> Dict[str, str]:
        """Return a sorted copy of every flag currently set."""
        return {name: self._values[name] for name in sorted(self._values)}
