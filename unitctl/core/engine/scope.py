"""
Scope chain — which nested unit definitions a node can see.

Every node gets its own Scope whose parent is the scope of the node
that required it. Definitions declared with ``@unit`` inside a body
are recorded in that body's scope, so they are visible to the unit
itself and everything it requires, but never to siblings or ancestors.
Lookups walk outward; the first hit wins, and a hit always takes
precedence over the filesystem loader.

A scope is filled while its body is evaluated, then sealed. It is
closed when the resolver leaves the node, on success or failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from unitctl.core.engine.errors import MalformedDefinition, UnitError

if TYPE_CHECKING:
    from unitctl.core.engine.definition import NestedDefinition

logger = logging.getLogger(__name__)


class Scope:
    """One link in the scope chain."""

    def __init__(self, owner: str = "", parent: Scope | None = None):
        self.owner = owner
        self.parent = parent
        self._definitions: dict[str, NestedDefinition] = {}
        self._masked: set[str] = set()
        self._sealed = False
        self._closed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def chain(self) -> tuple[str, ...]:
        """Owners from this scope outward to the root."""
        owners: list[str] = []
        scope: Scope | None = self
        while scope is not None:
            owners.append(scope.owner)
            scope = scope.parent
        return tuple(owners)

    def child(self, owner: str) -> Scope:
        """Create the scope for a node required from this one."""
        if self._closed:
            raise UnitError(owner, f"scope of '{self.owner}' is already closed")
        return Scope(owner=owner, parent=self)

    def define(self, name: str, definition: NestedDefinition) -> None:
        """Register a nested definition. Only allowed before sealing."""
        if self._sealed or self._closed:
            raise UnitError(
                self.owner,
                f"cannot define '{name}': scope of '{self.owner}' is sealed",
            )
        if name in self._definitions:
            raise MalformedDefinition(
                self.owner, f"nested unit '{name}' is defined more than once"
            )
        self._definitions[name] = definition
        logger.debug("Scope %s: defined nested unit %s", self.owner or "<root>", name)

    def seal(self) -> None:
        self._sealed = True

    def local_names(self) -> list[str]:
        """Nested definitions declared directly in this scope."""
        return list(self._definitions)

    def lookup(self, name: str) -> NestedDefinition | None:
        """Find the nearest nested definition for ``name``.

        A name masked anywhere between this scope and the definition
        is invisible from here.
        """
        scope: Scope | None = self
        while scope is not None:
            if name in scope._masked:
                return None
            found = scope._definitions.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    @contextmanager
    def masking(self, name: str) -> Iterator[Scope]:
        """Hide ``name`` from lookups through this scope while the block runs."""
        already = name in self._masked
        self._masked.add(name)
        try:
            yield self
        finally:
            if not already:
                self._masked.discard(name)

    def close(self) -> None:
        """Drop this scope's definitions. Safe to call more than once."""
        if self._closed:
            return
        self._definitions.clear()
        self._masked.clear()
        self._sealed = True
        self._closed = True

    def __enter__(self) -> Scope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Scope owner={self.owner!r} definitions={self.local_names()!r}>"
