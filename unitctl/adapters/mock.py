"""
Mock adapter — scripted stand-in for external programs.

Tests use it to play the outside world: each command can be given a
sequence of results, consumed one per call, so a check can report
not-met before remediate and met after it.
"""

from __future__ import annotations

from unitctl.adapters.base import Adapter, ExecutionContext
from unitctl.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    Unscripted commands succeed (or fail, with ``default_ok=False``).
    Scripted commands replay their results in order and then keep
    returning the last one.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_ok: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_ok = default_ok
        self._default_output = default_output
        self._scripts: dict[str, list[bool]] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Command lines executed, in order."""
        return [ctx.action.display for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def script(self, command: str, *results: bool) -> None:
        """Queue results for an exact command line."""
        self._scripts[command] = list(results)

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        command = context.action.display

        ok = self._default_ok
        queued = self._scripts.get(command)
        if queued:
            ok = queued.pop(0) if len(queued) > 1 else queued[0]

        if ok:
            return Receipt.success(
                adapter=self._name,
                command=command,
                output=self._default_output,
                return_code=0,
                metadata={"mock": True},
            )
        return Receipt.failure(
            adapter=self._name,
            command=command,
            error="[mock] failed",
            return_code=1,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and scripts."""
        self._call_log.clear()
        self._scripts.clear()
