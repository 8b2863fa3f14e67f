"""Adapters — bindings between units and external programs.

Public re-exports for convenient access.
"""

from unitctl.adapters.base import Adapter, ExecutionContext
from unitctl.adapters.mock import MockAdapter
from unitctl.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "Adapter",
    "ExecutionContext",
    "MockAdapter",
    "ShellCommandAdapter",
]
