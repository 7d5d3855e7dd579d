# -*- coding: utf-8 -*-
"""Tests for the SQLite take-off store and the repository wrapper."""

import pytest

from takeoff_wizard.core.domain import Geometry, Measurement, MeasurementKind, Takeoff
from takeoff_wizard.core.ledger import TakeoffRepository
from takeoff_wizard.takeoff_store import (
    DEFAULT_PIXELS_PER_UNIT, TakeoffStore, default_data_dir,
)


def sample_takeoff(n=2):
    t = Takeoff(name="Walls", kind=MeasurementKind.LINEAR, drawing="A-101")
    for i in range(n):
        points = [(0, i * 10), (100 * (i + 1), i * 10)]
        t.add_measurement(Measurement.create(
            t.id, f"Wall {i}", Geometry.from_points(t.kind, points), 100
        ))
    return t


@pytest.fixture
def store(data_dir):
    store = TakeoffStore(data_dir)
    store.connect()
    yield store
    store.disconnect()


def test_save_and_read_back(store):
    t = sample_takeoff()
    store.save_takeoff(t.to_record())

    record = store.get_takeoff(t.id)
    assert record['name'] == "Walls"
    assert record['quantity'] == "3.00"
    assert record['status'] == "complete"
    assert record['drawing'] == "A-101"
    assert record['locked'] is False
    assert [m['label'] for m in record['measurements']] == ["Wall 0", "Wall 1"]
    assert record['measurements'][1]['geometry'] == [[0.0, 10.0], [200.0, 10.0]]


def test_save_is_last_write_wins(store):
    t = sample_takeoff(3)
    store.save_takeoff(t.to_record())
    t.remove_measurement(t.measurement_ids[0])
    t.locked = True
    store.save_takeoff(t.to_record())

    record = store.get_takeoff(t.id)
    assert len(record['measurements']) == 2
    assert record['locked'] is True
    assert len(store.get_all_takeoffs()) == 1


def test_delete_cascades_to_measurements(store):
    t = sample_takeoff()
    store.save_takeoff(t.to_record())
    store.delete_takeoff(t.id)

    assert store.get_takeoff(t.id) is None
    cursor = store.connection.execute("SELECT COUNT(*) FROM measurements")
    assert cursor.fetchone()[0] == 0


def test_takeoffs_listed_in_creation_order(store):
    first, second = sample_takeoff(1), sample_takeoff(1)
    store.save_takeoff(first.to_record())
    store.save_takeoff(second.to_record())
    assert [r['id'] for r in store.get_all_takeoffs()] == [first.id, second.id]


def test_scale_setting(store):
    assert store.get_pixels_per_unit() == DEFAULT_PIXELS_PER_UNIT
    store.set_app_setting('pixels_per_unit', 150.0)
    assert store.get_pixels_per_unit() == 150.0


def test_unreadable_scale_falls_back_to_default(store):
    store.set_app_setting('pixels_per_unit', 'abc')
    assert store.get_pixels_per_unit() == DEFAULT_PIXELS_PER_UNIT
    store.set_app_setting('pixels_per_unit', -3)
    assert store.get_pixels_per_unit() == DEFAULT_PIXELS_PER_UNIT


def test_non_finite_scale_falls_back_to_default(store):
    store.set_app_setting('pixels_per_unit', float('inf'))
    assert store.get_pixels_per_unit() == DEFAULT_PIXELS_PER_UNIT
    store.set_app_setting('pixels_per_unit', 'inf')
    assert store.get_pixels_per_unit() == DEFAULT_PIXELS_PER_UNIT


def test_bad_geometry_json_is_reported(store, capsys):
    t = sample_takeoff(1)
    store.save_takeoff(t.to_record())
    store.connection.execute("UPDATE measurements SET geometry = '{not json'")
    store.connection.commit()

    record = store.get_takeoff(t.id)
    assert record['measurements'][0]['geometry'] == []
    assert "Warning: Could not read geometry" in capsys.readouterr().out


def test_schema_creation_is_idempotent(data_dir):
    for _ in range(2):
        store = TakeoffStore(data_dir)
        store.connect()
        store.disconnect()


def test_requires_connection(data_dir):
    with pytest.raises(RuntimeError, match="Not connected"):
        TakeoffStore(data_dir).get_all_takeoffs()


def test_unopenable_data_dir_raises_runtime_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(RuntimeError, match="Could not open"):
        TakeoffStore(str(blocker)).connect()


def test_default_data_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TAKEOFF_WIZARD_DATA_DIR", str(tmp_path))
    assert default_data_dir() == str(tmp_path)
    monkeypatch.delenv("TAKEOFF_WIZARD_DATA_DIR")
    assert default_data_dir().endswith(".takeoff_wizard")


def test_repository_returns_domain_objects(data_dir):
    t = sample_takeoff()
    with TakeoffRepository(data_dir) as repo:
        repo.save_record(t.to_record())
        repo.set_scale(80)

    with TakeoffRepository(data_dir) as repo:
        loaded = repo.load(t.id)
        assert repo.load("missing") is None
        assert [x.id for x in repo.load_all()] == [t.id]
        assert repo.get_scale() == 80.0

    assert loaded.quantity == t.quantity
    assert loaded.measurement_ids == t.measurement_ids
    assert loaded.measurements[0].scale == 100.0


def test_repository_skips_record_with_invalid_scale(data_dir, capsys):
    good = sample_takeoff()
    bad = sample_takeoff(1)
    record = bad.to_record()
    record['measurements'][0]['scale'] = 0
    with TakeoffRepository(data_dir) as repo:
        repo.save_record(good.to_record())
        repo.save_record(record)

    with TakeoffRepository(data_dir) as repo:
        assert [x.id for x in repo.load_all()] == [good.id]
        assert repo.load(bad.id) is None

    assert f"Skipping malformed take-off {bad.id}" in capsys.readouterr().out
