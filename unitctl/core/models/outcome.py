"""
Outcome model — the result of resolving one unit.

Every node in a resolution tree ends in exactly one Outcome. It is the
two-valued contract between the engine and its callers: a unit either
holds ("ok") or the run stops ("failed"). The ``kind`` field says why.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

OutcomeKind = Literal[
    "met",               # check passed on the first try
    "remediated",        # check failed, remediate ran, re-check passed
    "not_found",         # no nested definition and no loader match
    "ineffective",       # re-check still failed after remediate
    "malformed",         # body did not bind both check and remediate
    "evaluation_error",  # body raised while being evaluated
    "cyclic",            # name already on the current resolution path
]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Outcome(BaseModel):
    """Terminal status of a single unit.

    Failures are values, not exceptions: the resolver hands a failed
    Outcome back up the tree unchanged, and each ancestor returns it
    without running its own check or remediate.
    """

    unit: str
    status: Literal["ok", "failed"] = "ok"
    kind: OutcomeKind = "met"
    error: str | None = None

    finished_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the unit holds."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the unit aborted the run."""
        return self.status == "failed"

    @property
    def remediated(self) -> bool:
        return self.kind == "remediated"

    @classmethod
    def success(
        cls,
        unit: str,
        remediated: bool = False,
        **kwargs: Any,
    ) -> Outcome:
        """Create a success outcome."""
        return cls(
            unit=unit,
            status="ok",
            kind="remediated" if remediated else "met",
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        unit: str,
        kind: OutcomeKind,
        error: str,
        **kwargs: Any,
    ) -> Outcome:
        """Create a failure outcome."""
        return cls(
            unit=unit,
            status="failed",
            kind=kind,
            error=error,
            **kwargs,
        )
