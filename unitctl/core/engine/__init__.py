"""Resolution engine — loader, evaluator, resolver, runner, reporter.

    from unitctl.core.engine import Resolver, UnitLoader
"""

from unitctl.core.engine.errors import (
    CyclicRequirement,
    InvalidUnitName,
    MalformedDefinition,
    UnitError,
    UnitNotFound,
)
from unitctl.core.engine.evaluator import Evaluator, NodeDescriptor, UnitContext
from unitctl.core.engine.loader import UnitLoader
from unitctl.core.engine.reporter import NullReporter, RecordingReporter, Reporter
from unitctl.core.engine.resolver import ResolutionStats, Resolver
from unitctl.core.engine.runner import Runner
from unitctl.core.engine.scope import Scope

__all__ = [
    "CyclicRequirement",
    "Evaluator",
    "InvalidUnitName",
    "MalformedDefinition",
    "NodeDescriptor",
    "NullReporter",
    "RecordingReporter",
    "Reporter",
    "ResolutionStats",
    "Resolver",
    "Runner",
    "Scope",
    "UnitContext",
    "UnitError",
    "UnitLoader",
    "UnitNotFound",
]
