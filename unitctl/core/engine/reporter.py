"""
Reporter protocol — the stream of tree events a resolution produces.

    enter(position)              a node is about to be evaluated
    message(position, message)   the node said something
    leave(position, outcome)     the node finished (ok or failed)

Events arrive in tree order, depth-first. An ancestor of a failed
node never receives ``leave``: the run stops where it failed.
Reporters only observe; nothing they do changes the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from unitctl.core.models.outcome import Outcome
from unitctl.core.models.unit import Message, NodePosition


class Reporter:
    """Base reporter. Ignores every event."""

    def enter(self, position: NodePosition) -> None:
        pass

    def message(self, position: NodePosition, message: Message) -> None:
        pass

    def leave(self, position: NodePosition, outcome: Outcome) -> None:
        pass


NullReporter = Reporter


@dataclass
class TreeEvent:
    """One recorded reporter event."""

    kind: Literal["enter", "message", "leave"]
    position: NodePosition
    message: Message | None = None
    outcome: Outcome | None = None


@dataclass
class RecordingReporter(Reporter):
    """Keeps every event, in order."""

    events: list[TreeEvent] = field(default_factory=list)

    def enter(self, position: NodePosition) -> None:
        self.events.append(TreeEvent("enter", position))

    def message(self, position: NodePosition, message: Message) -> None:
        self.events.append(TreeEvent("message", position, message=message))

    def leave(self, position: NodePosition, outcome: Outcome) -> None:
        self.events.append(TreeEvent("leave", position, outcome=outcome))

    @property
    def entered(self) -> list[str]:
        """Unit names in the order they were entered."""
        return [e.position.name for e in self.events if e.kind == "enter"]

    @property
    def finished(self) -> list[tuple[str, str]]:
        """(unit, status) in the order nodes finished."""
        return [
            (e.position.name, e.outcome.status)
            for e in self.events
            if e.kind == "leave" and e.outcome is not None
        ]

    @property
    def messages(self) -> list[tuple[str, str]]:
        """(unit, text) for every message."""
        return [
            (e.position.name, e.message.text)
            for e in self.events
            if e.kind == "message" and e.message is not None
        ]
