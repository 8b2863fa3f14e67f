"""
Shell command adapter — run the external programs units ask for.

Output is captured and written to the ``unitctl.actions`` log, never to
the terminal, so process output never interleaves with the tree. No timeout is
applied: a hung program blocks the run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from unitctl.adapters.base import Adapter, ExecutionContext
from unitctl.core.models.action import Receipt
from unitctl.core.observability.logging_config import ACTION_LOGGER

logger = logging.getLogger(__name__)

action_log = logging.getLogger(ACTION_LOGGER)


class ShellCommandAdapter(Adapter):
    """Execute programs and capture their output.

    Action fields:
        argv: Program and arguments; with ``shell=True`` a single
            command line for ``sh -c``.
        cwd: Working directory (default: the unit's origin directory).
        env: Extra environment variables layered over ours.
        input: Text fed to stdin.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.action.argv or not context.action.argv[0]:
            return False, "Missing command"

        cwd = context.working_dir
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        command = action.display
        cwd = context.working_dir
        env = {**os.environ, **action.env} if action.env else None

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        action_log.info("[%s] $ %s", action.unit or "-", command)

        try:
            result = subprocess.run(
                action.argv[0] if action.shell else action.argv,
                shell=action.shell,
                cwd=cwd,
                env=env,
                input=action.input,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            action_log.info("[%s] command not found: %s", action.unit or "-", action.argv[0])
            return Receipt.failure(
                adapter=self.name,
                command=command,
                error=f"Command not found: {action.argv[0]}",
            )
        except OSError as e:
            action_log.info("[%s] cannot execute %s: %s", action.unit or "-", command, e)
            return Receipt.failure(
                adapter=self.name,
                command=command,
                error=f"Command execution error: {e}",
            )

        output = result.stdout.strip()
        stderr = result.stderr.strip()
        _log_output(action.unit, output, stderr, result.returncode)

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                command=command,
                output=output,
                return_code=result.returncode,
                metadata={"stderr": stderr},
            )
        return Receipt.failure(
            adapter=self.name,
            command=command,
            error=stderr or f"Command exited with code {result.returncode}",
            output=output,
            return_code=result.returncode,
        )


def _log_output(unit: str, stdout: str, stderr: str, return_code: int) -> None:
    """Copy raw process output into the action log."""
    tag = unit or "-"
    for line in stdout.splitlines():
        action_log.info("[%s] | %s", tag, line)
    for line in stderr.splitlines():
        action_log.info("[%s] ! %s", tag, line)
    action_log.info("[%s] exit %d", tag, return_code)
