"""
Resolve use case — resolve one root unit from the command line.

Loads config, works out the search roots, builds the resolver and runs
it. The reserved root name ``selftest`` swaps the search roots for the
built-in self-test units shipped with the package.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from unitctl.adapters.base import Adapter
from unitctl.core.config.loader import ConfigError, load_config, search_roots
from unitctl.core.engine.loader import UnitLoader
from unitctl.core.engine.reporter import Reporter
from unitctl.core.engine.resolver import ResolutionStats, Resolver
from unitctl.core.models.outcome import Outcome

logger = logging.getLogger(__name__)

SELFTEST_UNIT = "selftest"


def selftest_root() -> Path:
    """Directory holding the built-in self-test units."""
    return Path(__file__).resolve().parents[2] / "selftest" / "units"


@dataclass
class ResolveResult:
    """Result of resolving a root unit."""

    unit: str = ""
    args: tuple[str, ...] = ()
    outcome: Outcome | None = None
    stats: ResolutionStats = field(default_factory=ResolutionStats)
    search_roots: list[Path] = field(default_factory=list)
    duration_ms: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.outcome is not None and self.outcome.ok

    def to_dict(self) -> dict:
        result: dict = {"unit": self.unit, "args": list(self.args)}
        if self.error:
            result["error"] = self.error
            return result

        result["ok"] = self.ok
        result["search_roots"] = [str(r) for r in self.search_roots]
        result["duration_ms"] = self.duration_ms
        result["stats"] = self.stats.to_dict()
        if self.outcome:
            result["outcome"] = self.outcome.model_dump(mode="json")
        return result


def resolve_unit(
    name: str,
    args: Sequence[str] = (),
    config_path: Path | None = None,
    extra_paths: Sequence[str | Path] = (),
    reporter: Reporter | None = None,
    actions: Adapter | None = None,
) -> ResolveResult:
    """Resolve ``name`` and everything it requires.

    Args:
        name: Root unit name.
        args: Arguments bound to the root unit.
        config_path: Optional explicit path to unitctl.yml.
        extra_paths: Search roots tried before the configured ones.
        reporter: Receives tree events as the run progresses.
        actions: Adapter for external actions (default: shell).

    Returns:
        ResolveResult; ``error`` is set only when the run could not start.
    """
    result = ResolveResult(unit=name, args=tuple(args))

    if name == SELFTEST_UNIT:
        roots = [selftest_root()]
    else:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            result.error = str(e)
            return result
        roots = search_roots(config, extra=extra_paths)

    result.search_roots = roots
    logger.info("Resolving %s (search roots: %s)", name, ", ".join(map(str, roots)) or "none")

    resolver = Resolver(UnitLoader(roots), actions=actions, reporter=reporter)

    start = time.monotonic()
    result.outcome = resolver.resolve(name, tuple(args))
    result.duration_ms = int((time.monotonic() - start) * 1000)
    result.stats = resolver.stats

    return result


def locate_unit(
    name: str,
    config_path: Path | None = None,
    extra_paths: Sequence[str | Path] = (),
) -> tuple[Path | None, list[Path]]:
    """Where ``name`` would be loaded from, and the roots searched.

    Raises:
        ConfigError: If unitctl.yml is invalid.
        InvalidUnitName: If the name cannot map onto a path.
    """
    if name == SELFTEST_UNIT:
        roots = [selftest_root()]
    else:
        roots = search_roots(load_config(config_path), extra=extra_paths)
    return UnitLoader(roots).locate(name), roots
