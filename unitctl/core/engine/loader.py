"""
Unit loader — find a unit's definition file on the search path.

Structured names map onto relative paths: ``pkg/apt`` and ``pkg.apt``
both resolve to ``<root>/pkg/apt.py``, or to ``<root>/pkg/apt/__unit__.py``
for a unit that keeps resources in its own directory. Roots are tried
in order and the first match wins.

Which roots to search is the caller's business (see
``unitctl.core.config.loader.search_roots``); the loader only walks them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from unitctl.core.engine.definition import FileDefinition
from unitctl.core.engine.errors import InvalidUnitName, UnitError, UnitNotFound

logger = logging.getLogger(__name__)

UNIT_SUFFIX = ".py"
DIRECTORY_UNIT = "__unit__.py"

_SEPARATOR = re.compile(r"[/.]")


def split_name(name: str) -> list[str]:
    """Split a structured unit name into path segments.

    Raises:
        InvalidUnitName: If the name is empty or a segment is unusable
            as a path component.
    """
    if not name or not name.strip():
        raise InvalidUnitName(name, "empty name")
    if name.startswith("/") or "\\" in name:
        raise InvalidUnitName(name, "must be a relative name")

    segments = _SEPARATOR.split(name)
    for segment in segments:
        if not segment:
            raise InvalidUnitName(name, "empty segment")
        if segment.startswith("__"):
            raise InvalidUnitName(name, f"reserved segment '{segment}'")
    return segments


class UnitLoader:
    """Searches an ordered list of root directories for unit files."""

    def __init__(self, roots: Sequence[Path | str]):
        self.roots = [Path(r) for r in roots]

    def candidates(self, name: str) -> list[Path]:
        """All paths that could hold ``name``, in search order."""
        segments = split_name(name)
        paths: list[Path] = []
        for root in self.roots:
            base = root.joinpath(*segments)
            paths.append(base.with_name(base.name + UNIT_SUFFIX))
            paths.append(base / DIRECTORY_UNIT)
        return paths

    def locate(self, name: str) -> Path | None:
        """Path of the first matching definition file, or None."""
        for candidate in self.candidates(name):
            if candidate.is_file():
                return candidate
        return None

    def find(self, name: str) -> FileDefinition:
        """Load the definition for ``name``.

        Raises:
            UnitNotFound: If no root holds a matching file.
            UnitError: If the file exists but cannot be read.
        """
        path = self.locate(name)
        if path is None:
            logger.debug("Unit %s not found in %d roots", name, len(self.roots))
            raise UnitNotFound(name, searched=[str(r) for r in self.roots])

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise UnitError(name, f"cannot read {path}: {e}") from e

        logger.debug("Loaded unit %s from %s", name, path)
        return FileDefinition(name=name, path=path, source=source)
