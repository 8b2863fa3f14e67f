"""
Action and Receipt models — the external-action contract.

An Action is one external program a check or remediate wants to run.
A Receipt is what came back. Adapters take Actions and return Receipts,
never exceptions, so a program that could not start and a program that
exited non-zero look the same to the engine: a falsy Receipt.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """An external program invocation requested by a unit."""

    argv: list[str]
    unit: str = ""                  # unit whose check/remediate asked for it
    cwd: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    input: str | None = None        # text fed to stdin
    shell: bool = False             # argv[0] is a shell command line

    @property
    def display(self) -> str:
        """Human-readable command line for logs."""
        if self.shell:
            return self.argv[0]
        return " ".join(self.argv)


class Receipt(BaseModel):
    """Result of an external action.

    Truthiness is success, so a check body can simply
    ``return run("dpkg", "-s", "curl")``.
    """

    adapter: str
    command: str
    status: Literal["ok", "failed"] = "ok"
    return_code: int | None = None

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(
        cls,
        adapter: str,
        command: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            command=command,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        command: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )
