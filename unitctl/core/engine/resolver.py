"""
Resolver — the recursive walk over a unit's prerequisite tree.

For each node:

    1. find the definition: nested definitions in the scope chain first,
       then the loader
    2. evaluate the body (messages stream to the reporter as they happen)
    3. resolve every prerequisite, depth-first, in declaration order
    4. apply check → remediate → re-check to the node itself
    5. report the node's outcome

The first failure anywhere ends the run. It is returned up the tree
unchanged; no ancestor runs its own check or remediate, and no later
prerequisite is touched. Nothing is cached: a unit required twice is
evaluated twice, and relies on its own check to be idempotent.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import partial

from unitctl.adapters.base import Adapter
from unitctl.core.engine.definition import Definition
from unitctl.core.engine.errors import CyclicRequirement, UnitError
from unitctl.core.engine.evaluator import Evaluator
from unitctl.core.engine.loader import UnitLoader
from unitctl.core.engine.reporter import Reporter
from unitctl.core.engine.runner import Runner
from unitctl.core.engine.scope import Scope
from unitctl.core.models.outcome import Outcome
from unitctl.core.models.unit import NodePosition

logger = logging.getLogger(__name__)


@dataclass
class ResolutionStats:
    """Counters for one run."""

    nodes: int = 0
    satisfied: int = 0
    remediated: int = 0

    def to_dict(self) -> dict:
        return {
            "nodes": self.nodes,
            "satisfied": self.satisfied,
            "remediated": self.remediated,
        }


class Resolver:
    """Resolves one root unit and everything it requires."""

    def __init__(
        self,
        loader: UnitLoader,
        actions: Adapter | None = None,
        reporter: Reporter | None = None,
        evaluator: Evaluator | None = None,
        runner: Runner | None = None,
    ):
        if actions is None:
            from unitctl.adapters.shell.command import ShellCommandAdapter

            actions = ShellCommandAdapter()

        self._loader = loader
        self._reporter = reporter or Reporter()
        self._evaluator = evaluator or Evaluator(actions)
        self._runner = runner or Runner()
        self.stats = ResolutionStats()

    def resolve(
        self,
        name: str,
        args: tuple[str, ...] = (),
        scope: Scope | None = None,
    ) -> Outcome:
        """Resolve ``name`` as the root of a fresh run."""
        self.stats = ResolutionStats()
        position = NodePosition.root(name, tuple(args))

        if scope is not None:
            return self._resolve(position, scope)
        with Scope() as root_scope:
            return self._resolve(position, root_scope)

    def find(self, name: str, scope: Scope) -> Definition:
        """Nested definition if one is visible, else the loader's file.

        Raises:
            UnitNotFound: If neither has it.
        """
        nested = scope.lookup(name)
        if nested is not None:
            logger.debug("Resolved %s from nested definition in %s", name, nested.declared_in)
            return nested
        return self._loader.find(name)

    def _resolve(self, position: NodePosition, scope: Scope) -> Outcome:
        start = time.monotonic()
        name = position.name
        self.stats.nodes += 1
        self._reporter.enter(position)

        try:
            if name in position.path[:-1]:
                raise CyclicRequirement(name, position.path[:-1])
            definition = self.find(name, scope)
            node = self._evaluator.evaluate(
                definition,
                position.args,
                scope,
                on_message=partial(self._reporter.message, position),
            )
        except UnitError as e:
            outcome = Outcome.failure(
                name,
                kind=e.kind,
                error=str(e),
                duration_ms=int((time.monotonic() - start) * 1000),
            )
            logger.info("%s: %s", name, e)
            self._reporter.leave(position, outcome)
            return outcome

        with node.scope:
            for prerequisite in node.prerequisites:
                child = position.child(prerequisite.name, prerequisite.args)
                outcome = self._resolve(child, node.scope)
                if outcome.failed:
                    logger.debug("%s: aborting, prerequisite %s failed", name, child.label)
                    return outcome

            outcome = self._runner.apply(node)

        if outcome.ok:
            self.stats.satisfied += 1
            if outcome.remediated:
                self.stats.remediated += 1
        self._reporter.leave(position, outcome)
        return outcome
