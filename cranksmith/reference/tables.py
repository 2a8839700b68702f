"""
Lookup-with-fallback for the static reference tables.

Every table the engine consults (chainlines, chainstays, cog pitch, hub
spacing, bottom brackets, cable pull, chain widths) is wrapped in a
ReferenceTable with a named default entry. A missing key never raises: the
default entry is returned and the result is flagged so callers can report
the degraded precision.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Hashable, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupResult:
    """Value returned by a table lookup."""
    table: str
    requested: Any  # Key the caller asked for
    key: Any  # Key whose entry was returned
    value: Any

    @property
    def fallback(self) -> bool:
        """True when the requested key was missing and the default was used."""
        return self.key != self.requested

    def describe(self) -> str:
        """Human readable explanation of a fallback lookup."""
        return (
            f"No {self.table} entry for '{self.requested}', "
            f"using the '{self.key}' value ({self.value})"
        )


def _normalize_key(key: Any) -> Any:
    """Enum members hash by name, so look them up by value."""
    if isinstance(key, Enum):
        return key.value
    if isinstance(key, str):
        return key.strip().lower()
    if isinstance(key, tuple):
        return tuple(_normalize_key(k) for k in key)
    return key


class ReferenceTable:
    """
    Read-only mapping with a default entry.

    Args:
        name: Table name used in fallback messages
        entries: Key to value mapping
        default_key: Entry used for unknown keys (must exist in entries)
    """

    def __init__(self, name: str, entries: Mapping[Hashable, Any], default_key: Hashable):
        normalized = {_normalize_key(k): v for k, v in entries.items()}
        default_key = _normalize_key(default_key)
        if default_key not in normalized:
            raise ValueError(f"Default key {default_key!r} missing from table {name}")
        self.name = name
        self.default_key = default_key
        self._entries = MappingProxyType(normalized)

    def __contains__(self, key: Any) -> bool:
        return _normalize_key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReferenceTable({self.name!r}, {len(self)} entries, default={self.default_key!r})"

    def keys(self) -> list:
        return list(self._entries.keys())

    def lookup(self, key: Any) -> LookupResult:
        """
        Look up a key, degrading to the default entry when absent.

        Args:
            key: Table key (enum members and strings are normalized)

        Returns:
            LookupResult with `fallback` set when the default entry was used
        """
        requested = _normalize_key(key)
        if requested in self._entries:
            return LookupResult(self.name, requested, requested, self._entries[requested])

        logger.debug("%s: no entry for %r, falling back to %r", self.name, requested, self.default_key)
        return LookupResult(self.name, requested, self.default_key, self._entries[self.default_key])

    def value(self, key: Any) -> Any:
        """Shorthand for lookup(key).value."""
        return self.lookup(key).value
