# -*- coding: utf-8 -*-
"""Tests for the application use cases and background persistence."""

import pytest

from takeoff_wizard.core.application import (
    AttachMeasurement, AttachMeasurementCommand, BackgroundPersistence,
    ClearMeasurements, ClearMeasurementsCommand, CreateTakeoff,
    CreateTakeoffCommand, DeleteMeasurement, DeleteMeasurementCommand,
    DeleteTakeoff, DeleteTakeoffCommand, LoadTakeoffs, SaveTakeoff,
    SaveTakeoffCommand,
)
from takeoff_wizard.core.capture_engine import CaptureEngine, CaptureState, Tool
from takeoff_wizard.core.ledger import TakeoffLedger


class RecordingOverlay:
    """Stands in for the overlay scene; records shape operations."""

    def __init__(self):
        self.shapes = set()
        self.committed = []

    def commit_trace(self, measurement_id):
        self.committed.append(measurement_id)
        self.shapes.add(measurement_id)

    def add_shape(self, measurement):
        self.shapes.add(measurement.id)

    def remove_shape(self, measurement_id):
        if measurement_id in self.shapes:
            self.shapes.remove(measurement_id)
            return True
        return False

    def remove_shapes(self, measurement_ids):
        return sum(1 for mid in list(measurement_ids) if self.remove_shape(mid))


@pytest.fixture
def ledger():
    return TakeoffLedger()


@pytest.fixture
def engine():
    return CaptureEngine(scale=100)


@pytest.fixture
def overlay():
    return RecordingOverlay()


@pytest.fixture
def persistence(data_dir):
    messages = []
    p = BackgroundPersistence(data_dir, notifier=messages.append)
    p.messages = messages
    yield p
    p.shutdown(wait=True)


def create(ledger, name, kind):
    return CreateTakeoff(ledger).execute(CreateTakeoffCommand(name=name, kind=kind))['takeoff_id']


def click_count(engine):
    engine.select_tool(Tool.COUNT)
    engine.pointer_down(10, 10)


def attach(ledger, engine, overlay, takeoff_id, label="Item"):
    return AttachMeasurement(ledger, engine, overlay).execute(
        AttachMeasurementCommand(takeoff_id=takeoff_id, label=label)
    )


def test_create_takeoff_result(ledger):
    result = CreateTakeoff(ledger).execute(
        CreateTakeoffCommand(name="Slab", kind="area", wbs_element="03.30")
    )
    assert result['status'] == "pending"
    assert result['quantity'] == "0.00"
    assert result['unit'] == "m²"
    assert ledger.get_takeoff(result['takeoff_id']).wbs_element == "03.30"


def test_attach_measurement_commits_shape(ledger, engine, overlay):
    tid = create(ledger, "Slab", "area")
    engine.select_tool(Tool.AREA)
    engine.pointer_down(0, 0)
    engine.pointer_move(100, 0)
    engine.pointer_move(100, 100)
    engine.pointer_up(0, 100)

    result = attach(ledger, engine, overlay, tid, "Ground floor")
    assert result['value'] == 1.0
    assert result['quantity'] == "1.00"
    assert result['status'] == "complete"
    assert overlay.committed == [result['measurement_id']]
    assert engine.state is CaptureState.IDLE


def test_attach_without_pending_raises(ledger, engine, overlay):
    tid = create(ledger, "Doors", "count")
    with pytest.raises(RuntimeError):
        attach(ledger, engine, overlay, tid)


@pytest.mark.parametrize("target", ["", "missing"])
def test_attach_to_unknown_takeoff_keeps_shape_pending(ledger, engine, overlay, target):
    click_count(engine)
    with pytest.raises(ValueError):
        attach(ledger, engine, overlay, target)
    assert engine.state is CaptureState.PENDING_CONFIRMATION


def test_attach_kind_mismatch_keeps_shape_pending(ledger, engine, overlay):
    tid = create(ledger, "Slab", "area")
    click_count(engine)
    with pytest.raises(ValueError, match="area"):
        attach(ledger, engine, overlay, tid)
    assert engine.pending is not None
    assert overlay.committed == []


def test_attach_to_locked_takeoff_rejected(ledger, engine, overlay):
    tid = create(ledger, "Doors", "count")
    ledger.set_locked(tid, True)
    click_count(engine)
    with pytest.raises(ValueError, match="locked"):
        attach(ledger, engine, overlay, tid)


def test_attach_blank_label_keeps_shape_pending(ledger, engine, overlay):
    tid = create(ledger, "Doors", "count")
    click_count(engine)
    with pytest.raises(ValueError):
        attach(ledger, engine, overlay, tid, "  ")
    assert engine.pending is not None
    assert ledger.get_takeoff(tid).measurements == []


def test_delete_measurement_removes_shape(ledger, engine, overlay):
    tid = create(ledger, "Doors", "count")
    click_count(engine)
    mid = attach(ledger, engine, overlay, tid)['measurement_id']

    result = DeleteMeasurement(ledger, overlay).execute(DeleteMeasurementCommand(mid))
    assert result['status'] == "pending"
    assert mid not in overlay.shapes


def test_delete_measurement_of_locked_takeoff_keeps_shape(ledger, engine, overlay):
    tid = create(ledger, "Doors", "count")
    click_count(engine)
    mid = attach(ledger, engine, overlay, tid)['measurement_id']
    ledger.set_locked(tid, True)

    with pytest.raises(ValueError):
        DeleteMeasurement(ledger, overlay).execute(DeleteMeasurementCommand(mid))
    assert mid in overlay.shapes


def test_delete_takeoff_cascades(ledger, engine, overlay, persistence):
    tid = create(ledger, "Doors", "count")
    other = create(ledger, "Windows", "count")
    ids = []
    for _ in range(3):
        click_count(engine)
        ids.append(attach(ledger, engine, overlay, tid)['measurement_id'])
    click_count(engine)
    kept = attach(ledger, engine, overlay, other)['measurement_id']

    result = DeleteTakeoff(ledger, overlay, persistence).execute(DeleteTakeoffCommand(tid))
    result['future'].result(timeout=5)

    assert result['measurement_ids'] == ids
    assert overlay.shapes == {kept}
    assert tid not in ledger
    assert [m.id for m in ledger.measurements()] == [kept]


def test_clear_measurements_skips_locked(ledger, engine, overlay):
    open_id = create(ledger, "Doors", "count")
    locked_id = create(ledger, "Windows", "count")
    click_count(engine)
    removed = attach(ledger, engine, overlay, open_id)['measurement_id']
    click_count(engine)
    kept = attach(ledger, engine, overlay, locked_id)['measurement_id']
    ledger.set_locked(locked_id, True)

    result = ClearMeasurements(ledger, overlay).execute(ClearMeasurementsCommand())
    assert result == {'removed': [removed], 'skipped': [locked_id]}
    assert overlay.shapes == {kept}
    assert ledger.get_takeoff(open_id).status.value == "pending"


def test_save_then_load(ledger, engine, overlay, persistence, data_dir):
    tid = create(ledger, "Doors", "count")
    for _ in range(2):
        click_count(engine)
        attach(ledger, engine, overlay, tid)

    result = SaveTakeoff(ledger, persistence).execute(SaveTakeoffCommand())
    assert result['futures'][tid].result(timeout=5) == tid

    restored = TakeoffLedger()
    restored_overlay = RecordingOverlay()
    loaded = LoadTakeoffs(restored, data_dir, restored_overlay).execute()
    assert loaded['takeoff_ids'] == [tid]
    assert loaded['measurement_count'] == 2
    assert loaded['scale'] == 100.0
    assert restored.get_takeoff(tid).quantity == "2"
    assert restored_overlay.shapes == set(ledger.get_takeoff(tid).measurement_ids)


def test_reload_drops_shapes_of_unsaved_measurements(ledger, engine, overlay, persistence, data_dir):
    tid = create(ledger, "Doors", "count")
    click_count(engine)
    attach(ledger, engine, overlay, tid)
    SaveTakeoff(ledger, persistence).execute(SaveTakeoffCommand())['futures'][tid].result(timeout=5)
    saved_ids = set(ledger.get_takeoff(tid).measurement_ids)

    click_count(engine)
    unsaved_id = attach(ledger, engine, overlay, tid)['measurement_id']
    assert unsaved_id in overlay.shapes

    LoadTakeoffs(ledger, data_dir, overlay).execute()
    assert set(ledger.get_takeoff(tid).measurement_ids) == saved_ids
    assert overlay.shapes == saved_ids


def test_save_failure_is_reported_and_ledger_untouched(ledger, tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    messages = []
    persistence = BackgroundPersistence(str(blocker), notifier=messages.append)
    tid = create(ledger, "Doors", "count")

    result = SaveTakeoff(ledger, persistence).execute(SaveTakeoffCommand([tid]))
    future = result['futures'][tid]
    persistence.shutdown(wait=True)

    assert isinstance(future.exception(), RuntimeError)
    assert len(messages) == 1
    assert "Doors" in messages[0] and "retry" in messages[0]
    assert tid in ledger


def test_save_requires_persistence(ledger):
    with pytest.raises(RuntimeError):
        SaveTakeoff(ledger, None)
