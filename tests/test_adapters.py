"""
Tests for adapter protocol, mock, and shell adapters.
"""

import logging
from pathlib import Path

from unitctl.adapters.base import ExecutionContext
from unitctl.adapters.mock import MockAdapter
from unitctl.adapters.shell.command import ShellCommandAdapter
from unitctl.core.models.action import Action, Receipt
from unitctl.core.observability.logging_config import ACTION_LOGGER

# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_working_dir_from_action(self):
        ctx = ExecutionContext(action=Action(argv=["ls"], cwd="/srv"), default_cwd="/units")
        assert ctx.working_dir == "/srv"

    def test_working_dir_default(self):
        ctx = ExecutionContext(action=Action(argv=["ls"]), default_cwd="/units")
        assert ctx.working_dir == "/units"


class TestReceipt:
    def test_truthiness(self):
        assert Receipt.success(adapter="shell", command="true")
        assert not Receipt.failure(adapter="shell", command="false", error="exit 1")

    def test_display(self):
        assert Action(argv=["dpkg", "-s", "curl"]).display == "dpkg -s curl"
        assert Action(argv=["echo a | wc -l"], shell=True).display == "echo a | wc -l"


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter()
        receipt = mock.dispatch(Action(argv=["anything"]))
        assert receipt.ok
        assert mock.call_count == 1

    def test_default_failure(self):
        mock = MockAdapter(default_ok=False)
        assert mock.dispatch(Action(argv=["anything"])).failed

    def test_script_replays_then_repeats_last(self):
        mock = MockAdapter()
        mock.script("probe", False, True)
        results = [mock.dispatch(Action(argv=["probe"])).ok for _ in range(4)]
        assert results == [False, True, True, True]

    def test_commands_log(self):
        mock = MockAdapter()
        mock.dispatch(Action(argv=["a", "1"]))
        mock.dispatch(Action(argv=["b"]))
        assert mock.commands == ["a 1", "b"]

    def test_reset(self):
        mock = MockAdapter()
        mock.script("probe", False)
        mock.dispatch(Action(argv=["probe"]))
        mock.reset()
        assert mock.call_count == 0
        assert mock.dispatch(Action(argv=["probe"])).ok

    def test_is_available(self):
        assert MockAdapter(available=True).is_available()
        assert not MockAdapter(available=False).is_available()

    def test_unavailable_adapter_refuses(self):
        mock = MockAdapter(available=False)
        receipt = mock.dispatch(Action(argv=["anything"]))
        assert receipt.failed
        assert "not available" in receipt.error
        assert mock.call_count == 0


# ── Shell Adapter Tests ──────────────────────────────────────────────


class TestShellCommandAdapter:
    def test_name(self):
        assert ShellCommandAdapter().name == "shell"

    def test_is_available(self):
        assert ShellCommandAdapter().is_available()

    def test_success(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(argv=["echo", "hello"]), default_cwd=str(tmp_path)
        )
        assert receipt.ok
        assert receipt.output == "hello"
        assert receipt.return_code == 0

    def test_failure(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(argv=["sh", "-c", "echo oops >&2; exit 3"]), default_cwd=str(tmp_path)
        )
        assert receipt.failed
        assert receipt.return_code == 3
        assert receipt.error == "oops"

    def test_shell_mode(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(argv=["printf 'a\\nb\\n' | wc -l"], shell=True), default_cwd=str(tmp_path)
        )
        assert receipt.ok
        assert receipt.output.strip() == "2"

    def test_runs_in_working_dir(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(Action(argv=["pwd"]), default_cwd=str(tmp_path))
        assert Path(receipt.output).resolve() == tmp_path.resolve()

    def test_env_and_input(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(
                argv=['read line; echo "$GREETING $line"'],
                shell=True,
                env={"GREETING": "hello"},
                input="world\n",
            ),
            default_cwd=str(tmp_path),
        )
        assert receipt.output == "hello world"

    def test_missing_program_is_a_failed_receipt(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(argv=["definitely-not-a-real-program-xyz"]), default_cwd=str(tmp_path)
        )
        assert receipt.failed
        assert "not found" in receipt.error

    def test_missing_working_dir(self, tmp_path: Path):
        receipt = ShellCommandAdapter().dispatch(
            Action(argv=["true"]), default_cwd=str(tmp_path / "gone")
        )
        assert receipt.failed
        assert "Validation failed" in receipt.error

    def test_output_goes_to_action_log(self, tmp_path: Path, caplog):
        action_logger = logging.getLogger(ACTION_LOGGER)
        action_logger.addHandler(caplog.handler)
        try:
            with caplog.at_level(logging.INFO, logger=ACTION_LOGGER):
                ShellCommandAdapter().dispatch(
                    Action(argv=["echo", "from-the-program"], unit="alpha"),
                    default_cwd=str(tmp_path),
                )
        finally:
            action_logger.removeHandler(caplog.handler)
        assert "[alpha] | from-the-program" in caplog.text
        assert "[alpha] exit 0" in caplog.text
