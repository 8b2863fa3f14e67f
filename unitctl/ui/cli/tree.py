"""
Tree reporter — draws a resolution as it happens.

    … webserver
    ├─ ✓ pkg/apt curl
    ├─ … nginx/config
    │  · writing /etc/nginx/sites-enabled/app
    ├─ ✓ nginx/config
    ✓ webserver

A node that finishes with nothing printed under it takes one line. A
node with messages or children shows a pending line (``…``) first and
a closing line with its marker afterwards. On a terminal the pending
line appears right away and is rewritten in place when possible;
otherwise it is held back until something needs to go under it.
"""

from __future__ import annotations

import sys

import click

from unitctl.core.engine.reporter import Reporter
from unitctl.core.models.outcome import Outcome
from unitctl.core.models.unit import Message, NodePosition

PENDING = "…"
OK = "✓"
FAIL = "✗"

_BRANCH = "├─ "
_PIPE = "│  "


def branch_prefix(depth: int) -> str:
    """Connector drawn before a node at ``depth``."""
    if depth == 0:
        return ""
    return _PIPE * (depth - 1) + _BRANCH


def continuation(depth: int) -> str:
    """Prefix for lines that belong to a node at ``depth``."""
    return _PIPE * depth


class TreeReporter(Reporter):
    """Renders reporter events with click."""

    def __init__(self, live: bool | None = None, show_args: bool = True):
        self._live = sys.stdout.isatty() if live is None else live
        self._show_args = show_args
        self._open: NodePosition | None = None
        self._deferred: list[NodePosition] = []

    def enter(self, position: NodePosition) -> None:
        self._settle()
        if self._live:
            click.echo(self._line(position, PENDING), nl=False)
            self._open = position
        else:
            self._deferred.append(position)

    def message(self, position: NodePosition, message: Message) -> None:
        self._settle()
        click.echo(f"{continuation(position.depth)}· {message.text}")

    def leave(self, position: NodePosition, outcome: Outcome) -> None:
        if self._open is not None and self._open == position:
            click.echo("\r", nl=False)
            self._open = None
        elif self._deferred and self._deferred[-1] == position:
            self._deferred.pop()
        else:
            self._settle()

        marker = click.style(OK, fg="green") if outcome.ok else click.style(FAIL, fg="red")
        click.echo(self._line(position, marker))
        if outcome.failed and outcome.error:
            click.secho(f"{continuation(position.depth)}  {outcome.error}", fg="red")

    def _settle(self) -> None:
        """Flush whatever is pending so new output can go under it."""
        if self._open is not None:
            click.echo()
            self._open = None
        for pending in self._deferred:
            click.echo(self._line(pending, PENDING))
        self._deferred.clear()

    def _line(self, position: NodePosition, marker: str) -> str:
        label = position.label if self._show_args else position.name
        return f"{branch_prefix(position.depth)}{marker} {label}"
