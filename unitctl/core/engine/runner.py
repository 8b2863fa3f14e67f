"""
Runner — the check → remediate → re-check contract for one node.

    check() met?      → ok, remediate never runs
    otherwise         → remediate(), result ignored
    check() met now?  → ok (remediated)
    otherwise         → failed: remediation ineffective

One cycle, no retries, no timeout. For the whole cycle the node is the
active context of its file and its own name is masked in its scope.
An exception from check counts as not met; one from remediate is
ignored. Either is named in the failure message if the node fails.
"""

from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager, nullcontext

from unitctl.core.engine.evaluator import NodeDescriptor
from unitctl.core.models.outcome import Outcome
from unitctl.core.observability.logging_config import ACTION_LOGGER

logger = logging.getLogger(__name__)
action_log = logging.getLogger(ACTION_LOGGER)

INEFFECTIVE = "remediation ineffective: check still not met after remediate"


class Runner:
    """Applies the idempotency contract to an evaluated node."""

    def apply(self, node: NodeDescriptor) -> Outcome:
        start = time.monotonic()

        with _activated(node), node.scope.masking(node.name):
            met, _ = self._probe(node, "check")
            if met:
                logger.info("%s: already satisfied", node.name)
                return Outcome.success(node.name, duration_ms=_elapsed_ms(start))

            logger.info("%s: not satisfied, remediating", node.name)
            remediate_error = self._remediate(node)

            met, check_error = self._probe(node, "re-check")
            if met:
                logger.info("%s: remediated", node.name)
                return Outcome.success(
                    node.name, remediated=True, duration_ms=_elapsed_ms(start)
                )

        logger.info("%s: still not satisfied after remediate", node.name)
        reasons = [r for r in (check_error, remediate_error) if r]
        error = INEFFECTIVE
        if reasons:
            error += f" ({'; '.join(reasons)})"
        return Outcome.failure(
            node.name,
            kind="ineffective",
            error=error,
            duration_ms=_elapsed_ms(start),
        )

    def _probe(self, node: NodeDescriptor, label: str) -> tuple[bool, str | None]:
        """Run the check. An exception counts as not met and is described."""
        try:
            return bool(node.check()), None
        except Exception as e:
            reason = f"{label} raised {type(e).__name__}: {e}"
            logger.info("%s: %s", node.name, reason)
            action_log.warning("[%s] %s", node.name, reason, exc_info=True)
            return False, reason

    def _remediate(self, node: NodeDescriptor) -> str | None:
        try:
            node.remediate()
        except Exception as e:
            reason = f"remediate raised {type(e).__name__}: {e}"
            logger.info("%s: %s", node.name, reason)
            action_log.warning("[%s] %s", node.name, reason, exc_info=True)
            return reason
        return None


def _activated(node: NodeDescriptor) -> AbstractContextManager:
    if node.context is None:
        return nullcontext()
    return node.context.active()


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
