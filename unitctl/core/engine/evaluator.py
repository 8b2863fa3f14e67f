"""
Evaluator — turn a unit definition into a node descriptor.

A unit body runs exactly once, in a fresh scope that is a child of the
scope of the unit that required it. The body talks to the engine only
through its UnitContext:

    require("pkg/apt", "curl")        # declare a prerequisite (not run yet)
    say("checking curl")              # progress line for the tree

    @check
    def installed():
        return run("dpkg", "-s", "curl")

    @remediate
    def install():
        run("apt-get", "install", "-y", "curl")

File bodies get the context's members as module globals (plus ``ctx``
itself); plain module-level ``def check()`` / ``def remediate()``
work too. Nested bodies declared with ``@unit`` receive the context
as their only argument.

Nested bodies and the checks they bind are closures over their file's
globals. Whenever a node's code runs (its body, its check, its
remediate) that node is made active on the file namespace, so bare
``args``, ``say``, ``run`` and the rest always mean the running node.

When the body finishes, exactly one check and one remediate must be
bound, otherwise the unit is malformed.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from unitctl.adapters.base import Adapter
from unitctl.core.engine.definition import Definition, FileDefinition, NestedDefinition
from unitctl.core.engine.errors import MalformedDefinition, UnitError
from unitctl.core.engine.scope import Scope
from unitctl.core.models.action import Action, Receipt
from unitctl.core.models.unit import Message, Prerequisite

logger = logging.getLogger(__name__)

MessageSink = Callable[[Message], None]

# Namespace key holding the context whose names are currently bound
_ACTIVE = "__unit_context__"

_MODULE_PREFIX = "unitctl.units."


@dataclass(frozen=True)
class NodeDescriptor:
    """An evaluated unit, ready for its prerequisites and its own contract."""

    name: str
    args: tuple[str, ...]
    origin: Path
    prerequisites: tuple[Prerequisite, ...]
    check: Callable[[], Any]
    remediate: Callable[[], Any]
    messages: tuple[Message, ...]
    scope: Scope
    context: UnitContext | None


class UnitContext:
    """What a unit body can see and do.

    ``name``, ``args`` and ``origin`` are fixed when the context is
    built and are not meant to change afterwards.
    """

    def __init__(
        self,
        name: str,
        args: tuple[str, ...],
        origin: Path,
        scope: Scope,
        actions: Adapter,
        on_message: MessageSink | None = None,
        namespace: dict[str, Any] | None = None,
    ):
        self.name = name
        self.args = args
        self.origin = origin
        self.scope = scope
        self.namespace = namespace
        self._actions = actions
        self._on_message = on_message
        self._prerequisites: list[Prerequisite] = []
        self._checks: list[Callable[[], Any]] = []
        self._remediates: list[Callable[[], Any]] = []
        self._messages: list[Message] = []
        self._evaluating = False

        # Built once so identity tells a seeded name from one the code rebound
        self.bindings: dict[str, Any] = {
            "ctx": self,
            "name": self.name,
            "args": self.args,
            "origin": self.origin,
            "require": self.require,
            "say": self.say,
            "check": self.check,
            "remediate": self.remediate,
            "unit": self.unit,
            "run": self.run,
            "sh": self.sh,
        }

    # ── Primitives ───────────────────────────────────────────────

    def require(self, name: str, *args: Any) -> None:
        """Declare a prerequisite. It is resolved after the body finishes."""
        if not self._evaluating:
            raise UnitError(
                self.name, "require() is only allowed while the unit body is evaluated"
            )
        self._prerequisites.append(
            Prerequisite(name=str(name), args=tuple(str(a) for a in args))
        )

    def say(self, text: Any) -> None:
        """Emit a progress message; it reaches the reporter immediately."""
        message = Message(text=str(text))
        self._messages.append(message)
        if self._on_message is not None:
            self._on_message(message)

    def check(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Decorator binding the unit's check. Truthy means met."""
        self._bind(self._checks, func, "check")
        return func

    def remediate(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Decorator binding the unit's remediate. Its result is ignored."""
        self._bind(self._remediates, func, "remediate")
        return func

    def unit(self, name_or_body: Any = None) -> Any:
        """Declare a nested unit visible to this unit and its descendants.

        Usable bare (``@unit``, named after the function) or with an
        explicit structured name (``@unit("pkg/apt")``).
        """
        if callable(name_or_body):
            return self._define(name_or_body.__name__, name_or_body)

        def decorator(body: Callable[[Any], Any]) -> Callable[[Any], Any]:
            return self._define(name_or_body or body.__name__, body)

        return decorator

    def run(
        self,
        program: str,
        *argv: Any,
        cwd: str | Path | None = None,
        env: dict[str, str] | None = None,
        input: str | None = None,
    ) -> Receipt:
        """Run an external program; the receipt is truthy on success.

        A program name that is also a unit visible from here is refused,
        since it would be ambiguous. While this unit's own check or
        remediate runs, its own name is masked, so ``run("git")`` from
        unit ``git`` reaches the real program.
        """
        if program in self.scope:
            raise UnitError(
                self.name,
                f"'{program}' is a unit in scope; declare it with require() instead",
            )
        action = Action(
            argv=[str(program), *(str(a) for a in argv)],
            unit=self.name,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env or {}),
            input=input,
        )
        return self._actions.dispatch(action, default_cwd=str(self.origin))

    def sh(
        self,
        command: str,
        cwd: str | Path | None = None,
        env: dict[str, str] | None = None,
        input: str | None = None,
    ) -> Receipt:
        """Run a command line through ``sh -c``."""
        action = Action(
            argv=[command],
            shell=True,
            unit=self.name,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env or {}),
            input=input,
        )
        return self._actions.dispatch(action, default_cwd=str(self.origin))

    # ── Internals ────────────────────────────────────────────────

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @contextmanager
    def active(self) -> Iterator[UnitContext]:
        """Point the bare names of this unit's file at this context.

        Only names still holding the previous context's value are
        swapped, and only those are put back, so functions the file
        defines under the same names are left alone.
        """
        namespace = self.namespace
        if namespace is None:
            yield self
            return

        previous: UnitContext = namespace.get(_ACTIVE, self)
        swapped = [
            key for key in self.bindings
            if namespace.get(key) is previous.bindings[key]
        ]
        namespace[_ACTIVE] = self
        for key in swapped:
            namespace[key] = self.bindings[key]
        try:
            yield self
        finally:
            namespace[_ACTIVE] = previous
            for key in swapped:
                if namespace.get(key) is self.bindings[key]:
                    namespace[key] = previous.bindings[key]

    def _bind(self, slot: list[Callable[[], Any]], func: Any, what: str) -> None:
        if not callable(func):
            raise MalformedDefinition(self.name, f"{what} must be callable")
        if slot:
            raise MalformedDefinition(self.name, f"{what} is bound more than once")
        slot.append(func)

    def _define(self, name: str, body: Callable[[Any], Any]) -> Callable[[Any], Any]:
        self.scope.define(
            name,
            NestedDefinition(
                name=name,
                body=body,
                origin=self.origin,
                declared_in=self.name,
                namespace=self.namespace,
            ),
        )
        return body


class Evaluator:
    """Evaluates definitions into NodeDescriptors."""

    def __init__(self, actions: Adapter):
        self._actions = actions

    def evaluate(
        self,
        definition: Definition,
        args: tuple[str, ...],
        enclosing: Scope,
        on_message: MessageSink | None = None,
    ) -> NodeDescriptor:
        """Run the body once and collect what it declared.

        The new scope is closed again if evaluation fails; on success
        it is handed to the caller inside the descriptor.

        Raises:
            MalformedDefinition: If check or remediate is missing or bound twice.
            UnitError: If the body raised.
        """
        name = definition.name
        scope = enclosing.child(name)
        ctx = UnitContext(
            name=name,
            args=tuple(args),
            origin=definition.origin,
            scope=scope,
            actions=self._actions,
            on_message=on_message,
            namespace=definition.namespace if isinstance(definition, NestedDefinition) else None,
        )

        try:
            ctx._evaluating = True
            try:
                self._run_body(definition, ctx)
            finally:
                ctx._evaluating = False
            scope.seal()
            node = self._describe(ctx)
        except BaseException:
            scope.close()
            raise

        logger.debug(
            "Evaluated %s: %d prerequisites, %d nested units",
            name,
            len(node.prerequisites),
            len(scope.local_names()),
        )
        return node

    def _run_body(self, definition: Definition, ctx: UnitContext) -> None:
        try:
            if isinstance(definition, FileDefinition):
                self._exec_file(definition, ctx)
            else:
                with ctx.active():
                    definition.body(ctx)
        except UnitError:
            raise
        except Exception as e:
            raise UnitError(ctx.name, f"{type(e).__name__}: {e}") from e

    def _exec_file(self, definition: FileDefinition, ctx: UnitContext) -> None:
        module_name = _MODULE_PREFIX + definition.name.replace("/", ".")
        spec = importlib.util.spec_from_file_location(module_name, str(definition.path))
        if spec is None:
            raise UnitError(ctx.name, f"cannot create module spec for {definition.path}")

        module = importlib.util.module_from_spec(spec)
        namespace = vars(module)
        namespace.update(ctx.bindings)
        namespace[_ACTIVE] = ctx
        ctx.namespace = namespace

        # The source the loader read is what runs; nothing is cached next to the unit
        code = compile(definition.source, str(definition.path), "exec")
        replaced = sys.modules.get(module_name)
        sys.modules[module_name] = module
        try:
            with ctx.active():
                exec(code, namespace)
        finally:
            if replaced is None:
                sys.modules.pop(module_name, None)
            else:
                sys.modules[module_name] = replaced

        # Plain module-level functions named check / remediate
        for what, slot, binder in (
            ("check", ctx._checks, ctx.check),
            ("remediate", ctx._remediates, ctx.remediate),
        ):
            value = namespace.get(what)
            if value is not ctx.bindings[what] and value not in slot:
                binder(value)

    def _describe(self, ctx: UnitContext) -> NodeDescriptor:
        if not ctx._checks:
            raise MalformedDefinition(ctx.name, f"unit '{ctx.name}' binds no check")
        if not ctx._remediates:
            raise MalformedDefinition(ctx.name, f"unit '{ctx.name}' binds no remediate")
        return NodeDescriptor(
            name=ctx.name,
            args=ctx.args,
            origin=ctx.origin,
            prerequisites=tuple(ctx._prerequisites),
            check=ctx._checks[0],
            remediate=ctx._remediates[0],
            messages=ctx.messages,
            scope=ctx.scope,
            context=ctx,
        )
