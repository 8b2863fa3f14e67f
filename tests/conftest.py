"""
Shared test fixtures and configuration.
"""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from unitctl.adapters.mock import MockAdapter
from unitctl.core.engine.loader import UnitLoader
from unitctl.core.engine.reporter import RecordingReporter
from unitctl.core.engine.resolver import Resolver


@pytest.fixture
def units_dir(tmp_path: Path) -> Path:
    """An empty unit search root."""
    root = tmp_path / "units"
    root.mkdir()
    return root


@pytest.fixture
def write_unit(units_dir: Path) -> Callable[[str, str], Path]:
    """Write a unit file under ``units_dir``; ``name`` may contain slashes."""

    def _write(name: str, body: str) -> Path:
        path = units_dir / f"{name}.py"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body))
        return path

    return _write


@pytest.fixture
def mock_actions() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def recorder() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def resolver(units_dir: Path, mock_actions: MockAdapter, recorder: RecordingReporter) -> Resolver:
    """Resolver over ``units_dir`` with scripted actions and recorded events."""
    return Resolver(UnitLoader([units_dir]), actions=mock_actions, reporter=recorder)
