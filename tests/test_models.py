"""
Tests for core models — Outcome, Prerequisite, NodePosition.
"""

import pytest
from pydantic import ValidationError

from unitctl.core.models.outcome import Outcome
from unitctl.core.models.unit import Message, NodePosition, Prerequisite


class TestOutcome:
    def test_success(self):
        outcome = Outcome.success("alpha")
        assert outcome.ok
        assert not outcome.failed
        assert outcome.kind == "met"
        assert not outcome.remediated

    def test_success_remediated(self):
        outcome = Outcome.success("alpha", remediated=True)
        assert outcome.ok
        assert outcome.remediated

    def test_failure(self):
        outcome = Outcome.failure("alpha", kind="cyclic", error="cyclic requirement: alpha → alpha")
        assert outcome.failed
        assert outcome.kind == "cyclic"
        assert "alpha → alpha" in outcome.error

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Outcome.failure("alpha", kind="exploded", error="?")

    def test_json_dump(self):
        data = Outcome.success("alpha", duration_ms=12).model_dump(mode="json")
        assert data["unit"] == "alpha"
        assert data["status"] == "ok"
        assert data["duration_ms"] == 12
        assert isinstance(data["finished_at"], str)


class TestPrerequisite:
    def test_str(self):
        assert str(Prerequisite(name="pkg/apt")) == "pkg/apt"
        assert str(Prerequisite(name="pkg/apt", args=("curl", "wget"))) == "pkg/apt curl wget"

    def test_frozen(self):
        prerequisite = Prerequisite(name="a")
        with pytest.raises(ValidationError):
            prerequisite.name = "b"


class TestNodePosition:
    def test_root(self):
        root = NodePosition.root("webserver")
        assert root.path == ("webserver",)
        assert root.depth == 0

    def test_child(self):
        child = NodePosition.root("webserver").child("pkg/apt", ("curl",))
        assert child.path == ("webserver", "pkg/apt")
        assert child.depth == 1
        assert child.label == "pkg/apt curl"

    def test_equality(self):
        assert NodePosition.root("a").child("b") == NodePosition.root("a").child("b")
        assert NodePosition.root("a").child("b") != NodePosition.root("c").child("b")


def test_message_timestamp_ordering():
    first = Message(text="one")
    second = Message(text="two")
    assert first.at <= second.at
