"""
Domain models — Pydantic types for unitctl.

All models are re-exported here for convenient access:

    from unitctl.core.models import Outcome, Prerequisite, Receipt
"""

from unitctl.core.models.action import Action, Receipt
from unitctl.core.models.config import UnitctlConfig
from unitctl.core.models.outcome import Outcome, OutcomeKind
from unitctl.core.models.unit import Message, NodePosition, Prerequisite

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # config.py
    "UnitctlConfig",
    # unit.py
    "Message",
    "NodePosition",
    # outcome.py
    "Outcome",
    "OutcomeKind",
    "Prerequisite",
]
