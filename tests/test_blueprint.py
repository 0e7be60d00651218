"""
Tests for blueprint models and the blueprint engine.
"""

from unittest.mock import Mock

import pytest

from emd.assembler import DocumentAssembler
from emd.blueprint import (
    Blueprint, BlueprintEngine, BlueprintResource, BlueprintStore, ResolvedResource,
)
from emd.catalog import ResourceType
from emd.errors import NotFoundError, PersistenceError, ValidationError

from fakes import ec2_detail


def ec2_ref(resource_id, name=""):
    return BlueprintResource(
        resource_type=ResourceType.EC2, region="ap-northeast-2",
        resource_id=resource_id, resource_name=name,
    )


def make_engine(*names, resources=0):
    store = BlueprintStore(blueprints=[
        Blueprint(name=name, resources=[ec2_ref(f"i-{i}") for i in range(resources)])
        for name in names
    ])
    saver = Mock()
    return BlueprintEngine(store, saver), saver


class TestCreateDelete:
    """Tests for creating and deleting blueprints."""

    def test_create_appends_selects_and_saves(self):
        """A new blueprint goes last, becomes selected and is saved."""
        engine, saver = make_engine("a", "b")
        blueprint = engine.create("  prod  ")
        assert blueprint.name == "prod"
        assert [bp.name for bp in engine.blueprints] == ["a", "b", "prod"]
        assert engine.selected_index == 2
        saver.assert_called_once_with(engine.store)
        assert engine.message == "Blueprint saved"

    def test_create_rejects_blank_name(self):
        """Blank names raise ValidationError and change nothing."""
        engine, saver = make_engine("a")
        with pytest.raises(ValidationError):
            engine.create("   ")
        assert len(engine.blueprints) == 1
        saver.assert_not_called()

    def test_delete_last_selected_decrements(self):
        """Deleting the selected last entry moves the selection up by one."""
        engine, _ = make_engine("a", "b", "c")
        engine.selected_index = 2
        assert engine.delete(2) is True
        assert engine.selected_index == 1

    def test_delete_first_keeps_zero(self):
        """Deleting at index 0 leaves the selection at 0."""
        engine, _ = make_engine("a", "b")
        engine.selected_index = 0
        engine.delete(0)
        assert engine.selected_index == 0

        engine.delete(0)
        assert engine.selected_index == 0
        assert engine.blueprints == []

    def test_delete_out_of_range(self):
        """A stale index is a no-op."""
        engine, saver = make_engine("a")
        assert engine.delete(5) is False
        saver.assert_not_called()

    def test_open_stale_index(self):
        """Opening a missing blueprint raises NotFoundError."""
        engine, _ = make_engine("a")
        with pytest.raises(NotFoundError):
            engine.open(3)


class TestReorder:
    """Tests for moving resources."""

    def test_move_up_zero_is_noop(self):
        """move_up(0) returns False for any length."""
        for length in range(4):
            engine, saver = make_engine("a", resources=length)
            if length:
                engine.open(0)
            assert engine.move_up(0) is False
            saver.assert_not_called()

    def test_move_down_last_is_noop(self):
        """move_down(last) returns False."""
        engine, saver = make_engine("a", resources=3)
        engine.open(0)
        assert engine.move_down(2) is False
        assert [r.resource_id for r in engine.current.resources] == ["i-0", "i-1", "i-2"]
        saver.assert_not_called()

    def test_move_writes_back_to_store(self):
        """A successful move is copied into the store and saved."""
        engine, saver = make_engine("a", resources=3)
        engine.open(0)
        assert engine.move_up(2) is True
        stored = engine.store.blueprints[0]
        assert [r.resource_id for r in stored.resources] == ["i-0", "i-2", "i-1"]
        saver.assert_called_once()


class TestResources:
    """Tests for adding and removing resources."""

    def test_add_requires_open_blueprint(self):
        """Adding with nothing open fails with a message."""
        engine, _ = make_engine("a")
        assert engine.add_resource(ec2_ref("i-1")) is False
        assert engine.message == "No blueprint is open"

    def test_duplicates_allowed(self):
        """The same resource can be added twice."""
        engine, _ = make_engine("a")
        engine.open(0)
        engine.add_resource(ec2_ref("i-1"))
        engine.add_resource(ec2_ref("i-1"))
        assert len(engine.store.blueprints[0].resources) == 2

    def test_failed_save_keeps_change(self):
        """A save failure keeps the in-memory change and reports it."""
        engine, saver = make_engine("a")
        saver.side_effect = PersistenceError("disk full")
        engine.open(0)
        assert engine.add_resource(ec2_ref("i-1")) is True
        assert [r.resource_id for r in engine.current.resources] == ["i-1"]
        assert [r.resource_id for r in engine.store.blueprints[0].resources] == ["i-1"]
        assert engine.message == "Blueprint save failed"

    def test_deleted_underneath(self):
        """Editing an open blueprint whose store entry vanished reports not found."""
        engine, _ = make_engine("a")
        engine.open(0)
        engine.store.blueprints.clear()
        engine.add_resource(ec2_ref("i-1"))
        assert engine.message == "Resource no longer exists"

    def test_display(self):
        """References show name and id when they differ."""
        assert ec2_ref("i-1", "web-1").display() == "web-1 (i-1)"
        assert ec2_ref("i-1").display() == "i-1"


def test_prod_end_to_end():
    """Reorder and remove, then assemble a single EC2 section for i-2."""
    engine, _ = make_engine()
    engine.create("prod")
    engine.open(engine.selected_index)
    engine.add_resource(ec2_ref("i-1", "web-1"))
    engine.add_resource(ec2_ref("i-2", "web-2"))

    assert engine.move_down(0) is True
    assert [r.resource_id for r in engine.current.resources] == ["i-2", "i-1"]

    assert engine.remove_resource(1) is True
    assert [r.resource_id for r in engine.current.resources] == ["i-2"]

    resolved = [ResolvedResource(r, detail=ec2_detail(r.resource_id, r.resource_name))
                for r in engine.current.resources]
    document = DocumentAssembler().render_blueprint(engine.current, resolved)

    assert document.text.count("## EC2 Instance") == 1
    assert "| Instance ID | i-2 |" in document.text
    assert "| Instance ID | i-1 |" not in document.text
