"""
Adapter base — the contract between units and external programs.

Checks and remediates never spawn processes themselves; they hand an
Action to an adapter and get a Receipt back. That keeps the engine's
view of the outside world binary (ok / failed) and lets tests swap in
a scripted adapter.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from pydantic import BaseModel

from unitctl.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action."""

    action: Action
    default_cwd: str = "."

    @property
    def working_dir(self) -> str:
        """Resolved working directory for the action."""
        return self.action.cwd or self.default_cwd


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def dispatch(self, action: Action, default_cwd: str = ".") -> Receipt:
        """Validate, execute and time an action. Never raises."""
        start_time = time.monotonic()
        context = ExecutionContext(action=action, default_cwd=default_cwd)

        if not self.is_available():
            return Receipt.failure(
                adapter=self.name,
                command=action.display,
                error=f"Adapter '{self.name}' is not available",
            )

        try:
            is_valid, error_msg = self.validate(context)
        except Exception as e:
            is_valid, error_msg = False, f"validation error: {e}"
        if not is_valid:
            return Receipt.failure(
                adapter=self.name,
                command=action.display,
                error=f"Validation failed: {error_msg}",
            )

        try:
            receipt = self.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", self.name, e)
            receipt = Receipt.failure(
                adapter=self.name,
                command=action.display,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
