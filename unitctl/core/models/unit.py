"""
Unit models — the values a unit body produces while it is evaluated.

A body declares prerequisites and emits messages; the resolver places
each node at a position in the tree. These are plain immutable values;
the callable parts of a node (check, remediate) live on the engine's
NodeDescriptor instead.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(UTC)


class Prerequisite(BaseModel):
    """A ``require(name, *args)`` call recorded during evaluation."""

    model_config = ConfigDict(frozen=True)

    name: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name} {' '.join(self.args)}"


class Message(BaseModel):
    """A progress line emitted by ``say()``."""

    model_config = ConfigDict(frozen=True)

    text: str
    at: datetime = Field(default_factory=_now)


class NodePosition(BaseModel):
    """Where a node sits in the resolution tree.

    ``path`` is the chain of unit names from the root down to and
    including this node; ``depth`` is its length minus one.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    args: tuple[str, ...] = ()
    path: tuple[str, ...] = ()

    @property
    def depth(self) -> int:
        return max(len(self.path) - 1, 0)

    @property
    def label(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name} {' '.join(self.args)}"

    def child(self, name: str, args: tuple[str, ...] = ()) -> NodePosition:
        """Position of a prerequisite directly under this node."""
        return NodePosition(name=name, args=args, path=(*self.path, name))

    @classmethod
    def root(cls, name: str, args: tuple[str, ...] = ()) -> NodePosition:
        return cls(name=name, args=args, path=(name,))
