"""
Tests for the scope chain — nested definition lookup, masking, lifecycle.
"""

from pathlib import Path

import pytest

from unitctl.core.engine.definition import NestedDefinition
from unitctl.core.engine.errors import MalformedDefinition, UnitError
from unitctl.core.engine.scope import Scope


def _nested(name: str, declared_in: str = "parent") -> NestedDefinition:
    return NestedDefinition(
        name=name, body=lambda ctx: None, origin=Path("/units"), declared_in=declared_in
    )


class TestLookup:
    def test_local_definition(self):
        scope = Scope("a")
        definition = _nested("helper")
        scope.define("helper", definition)
        assert scope.lookup("helper") is definition
        assert "helper" in scope

    def test_missing(self):
        assert Scope("a").lookup("helper") is None

    def test_walks_outward(self):
        outer = Scope("a")
        definition = _nested("helper")
        outer.define("helper", definition)
        inner = outer.child("b").child("c")
        assert inner.lookup("helper") is definition

    def test_nearest_wins(self):
        outer = Scope("a")
        outer.define("helper", _nested("helper", "a"))
        inner = outer.child("b")
        closer = _nested("helper", "b")
        inner.define("helper", closer)
        assert inner.lookup("helper") is closer

    def test_invisible_to_ancestors_and_siblings(self):
        root = Scope()
        a = root.child("a")
        sibling = root.child("c")
        a.define("helper", _nested("helper", "a"))
        assert root.lookup("helper") is None
        assert sibling.lookup("helper") is None

    def test_chain(self):
        scope = Scope("").child("a").child("b")
        assert scope.chain == ("b", "a", "")


class TestDefine:
    def test_duplicate_is_malformed(self):
        scope = Scope("a")
        scope.define("helper", _nested("helper"))
        with pytest.raises(MalformedDefinition, match="more than once"):
            scope.define("helper", _nested("helper"))

    def test_sealed_rejects_definitions(self):
        scope = Scope("a")
        scope.seal()
        with pytest.raises(UnitError, match="sealed"):
            scope.define("helper", _nested("helper"))

    def test_local_names(self):
        scope = Scope("a")
        scope.define("x", _nested("x"))
        scope.define("y", _nested("y"))
        assert scope.local_names() == ["x", "y"]


class TestMasking:
    def test_mask_hides_outer_definition(self):
        outer = Scope("parent")
        outer.define("git", _nested("git"))
        node = outer.child("git")
        with node.masking("git"):
            assert node.lookup("git") is None
        assert node.lookup("git") is not None

    def test_mask_does_not_hide_other_names(self):
        outer = Scope("parent")
        outer.define("git", _nested("git"))
        outer.define("curl", _nested("curl"))
        node = outer.child("git")
        with node.masking("git"):
            assert node.lookup("curl") is not None

    def test_mask_lifted_on_error(self):
        outer = Scope("parent")
        outer.define("git", _nested("git"))
        node = outer.child("git")
        with pytest.raises(RuntimeError):
            with node.masking("git"):
                raise RuntimeError("boom")
        assert node.lookup("git") is not None

    def test_mask_visible_from_descendants(self):
        outer = Scope("parent")
        outer.define("git", _nested("git"))
        node = outer.child("git")
        below = node.child("other")
        with node.masking("git"):
            assert below.lookup("git") is None


class TestLifecycle:
    def test_context_manager_closes(self):
        with Scope("a") as scope:
            scope.define("helper", _nested("helper"))
        assert scope.closed
        assert scope.lookup("helper") is None

    def test_closed_on_exception(self):
        scope = Scope("a")
        with pytest.raises(ValueError):
            with scope:
                raise ValueError("boom")
        assert scope.closed

    def test_close_is_idempotent(self):
        scope = Scope("a")
        scope.close()
        scope.close()
        assert scope.closed

    def test_closed_scope_has_no_children(self):
        scope = Scope("a")
        scope.close()
        with pytest.raises(UnitError, match="closed"):
            scope.child("b")
