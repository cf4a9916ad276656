"""Per-pass store of generated helper functions.

Emitters that need more than a one-line expression (prime test, list
statistics, ...) ask the registry for a helper by logical name. The first
request allocates an identifier and records the definition; every later
request in the same pass gets the same identifier back, so each helper is
written out exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from skoolbot.names import NameDB, NameKind, NameResolver

logger = logging.getLogger(__name__)

# Stands in for the helper's final identifier inside template lines.
FUNCTION_NAME_PLACEHOLDER = "{leCUI8hutHZI4480Dc}"


class HelperRegistry:
    """Deduplicating map from logical helper name to emitted identifier."""

    def __init__(self, names: NameResolver | None = None) -> None:
        self._names: NameResolver = names if names is not None else NameDB()
        self._identifiers: dict[str, str] = {}
        self._definitions: dict[str, str] = {}

    def reset(self, names: NameResolver | None = None) -> None:
        """Forget every helper. Call before each independent pass."""
        if names is not None:
            self._names = names
        self._identifiers.clear()
        self._definitions.clear()

    def provide(self, logical_name: str, lines: Sequence[str]) -> str:
        """Return the identifier for *logical_name*, registering it on first use."""
        existing = self._identifiers.get(logical_name)
        if existing is not None:
            return existing
        ident = self._names.get_distinct_name(logical_name, NameKind.HELPER)
        self._identifiers[logical_name] = ident
        body = "\n".join(lines).replace(FUNCTION_NAME_PLACEHOLDER, ident)
        self._definitions[logical_name] = body
        logger.debug("registered helper %s as %s", logical_name, ident)
        return ident

    def identifier(self, logical_name: str) -> str | None:
        return self._identifiers.get(logical_name)

    def definitions(self) -> Iterator[str]:
        """Helper bodies in the order they were first requested."""
        yield from self._definitions.values()

    def __contains__(self, logical_name: object) -> bool:
        return logical_name in self._identifiers

    def __len__(self) -> int:
        return len(self._definitions)
