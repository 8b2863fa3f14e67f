"""
Engine errors.

These are raised at the seams (loader, evaluator, scope) and caught by
the resolver, which turns each one into a failed Outcome at the tree
position where it happened. They never reach the CLI as tracebacks.
"""

from __future__ import annotations


class UnitError(Exception):
    """Base class for everything that can go wrong with a unit."""

    kind = "evaluation_error"

    def __init__(self, unit: str, message: str):
        super().__init__(message)
        self.unit = unit


class UnitNotFound(UnitError):
    """No nested definition and no file on the search path."""

    kind = "not_found"

    def __init__(self, unit: str, searched: list[str] | None = None):
        self.searched = list(searched or [])
        message = f"unit '{unit}' not found"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(unit, message)


class InvalidUnitName(UnitNotFound):
    """A name that cannot map onto a relative path."""

    def __init__(self, unit: str, reason: str):
        UnitError.__init__(self, unit, f"invalid unit name '{unit}': {reason}")
        self.searched = []


class MalformedDefinition(UnitError):
    """A body that did not bind exactly one check and one remediate."""

    kind = "malformed"


class CyclicRequirement(UnitError):
    """A unit that requires itself, directly or through others."""

    kind = "cyclic"

    def __init__(self, unit: str, path: tuple[str, ...]):
        chain = " → ".join((*path, unit))
        super().__init__(unit, f"cyclic requirement: {chain}")
        self.path = path
