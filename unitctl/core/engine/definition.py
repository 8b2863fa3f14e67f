"""
Unit definitions — the raw, not-yet-evaluated form of a unit.

A definition comes from one of two places: a file found by the loader,
or a function declared with ``@unit`` inside another unit's body.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class FileDefinition:
    """A unit defined by a Python source file on the search path."""

    name: str
    path: Path
    source: str

    @property
    def origin(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class NestedDefinition:
    """A unit declared inside another unit's body.

    ``origin`` is the directory of the file that declared it, so a
    nested unit finds co-located resources next to its parent's file.
    ``namespace`` is that file's module namespace, whose bare names
    (``args``, ``run``, ...) point at the nested unit while it runs.
    """

    name: str
    body: Callable[[Any], Any]
    origin: Path
    declared_in: str = ""
    namespace: dict[str, Any] | None = field(default=None, compare=False, repr=False)


Definition = FileDefinition | NestedDefinition
