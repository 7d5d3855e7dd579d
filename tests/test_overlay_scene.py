# -*- coding: utf-8 -*-
"""Tests for the overlay drawing surface."""

import pytest
from PyQt5.QtCore import QEvent, Qt
from PyQt5.QtGui import QKeyEvent, QPixmap
from PyQt5.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsSimpleTextItem,
)

from takeoff_wizard.core.domain import Geometry, Measurement, MeasurementKind
from takeoff_wizard.overlay_scene import TakeoffOverlayScene

UNIT_SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100)]


@pytest.fixture
def scene(qapp):
    return TakeoffOverlayScene()


def press(scene, key):
    scene.keyPressEvent(QKeyEvent(QEvent.KeyPress, key, Qt.NoModifier))


def test_trace_is_transient_until_committed(scene):
    scene.draw_trace(MeasurementKind.AREA, UNIT_SQUARE[:2])
    scene.draw_trace(MeasurementKind.AREA, UNIT_SQUARE, closed=True)
    assert scene.has_trace()
    assert len(scene.items()) == 1

    item = scene.commit_trace("t1:m1")
    assert not scene.has_trace()
    assert scene.shape_ids() == ["t1:m1"]
    assert isinstance(item, QGraphicsPathItem)
    assert item.brush().style() != Qt.NoBrush


def test_commit_without_trace_raises(scene):
    with pytest.raises(RuntimeError):
        scene.commit_trace("t1:m1")


def test_clear_trace_removes_item(scene):
    scene.draw_trace(MeasurementKind.LINEAR, [(0, 0), (10, 0)])
    scene.clear_trace()
    assert scene.items() == []


def test_count_marker_shows_one(scene):
    scene.draw_trace(MeasurementKind.COUNT, [(50, 50)], closed=True)
    marker = scene.commit_trace("t1:m1")
    assert isinstance(marker, QGraphicsEllipseItem)
    labels = [c for c in marker.childItems() if isinstance(c, QGraphicsSimpleTextItem)]
    assert [label.text() for label in labels] == ["1"]
    assert marker.rect().center().x() == 50


def test_add_and_remove_shapes(scene):
    for i in range(3):
        m = Measurement.create(
            "t1", f"Door {i}", Geometry.from_points(MeasurementKind.COUNT, [(i, i)]), 100
        )
        scene.add_shape(m)
    ids = scene.shape_ids()
    assert len(ids) == 3

    assert scene.remove_shape(ids[0]) is True
    assert scene.remove_shape(ids[0]) is False
    assert scene.remove_shapes(ids) == 2
    assert scene.items() == []


def test_resize_keeps_item_coordinates(scene):
    scene.draw_trace(MeasurementKind.AREA, UNIT_SQUARE, closed=True)
    item = scene.commit_trace("t1:m1")
    before = item.sceneBoundingRect()

    scene.resize_surface(1024, 768)
    assert scene.sceneRect().width() == 1024
    scene.resize_surface(300, 200)
    assert scene.sceneRect().height() == 200
    assert item.sceneBoundingRect() == before


def test_interactive_flag_controls_selection(scene):
    scene.draw_trace(MeasurementKind.LINEAR, [(0, 0), (10, 0)])
    item = scene.commit_trace("t1:m1")
    assert not int(item.flags() & QGraphicsItem.ItemIsSelectable)

    scene.set_interactive(True)
    assert int(item.flags() & QGraphicsItem.ItemIsSelectable)

    scene.draw_trace(MeasurementKind.LINEAR, [(0, 5), (10, 5)])
    later = scene.commit_trace("t1:m2")
    assert int(later.flags() & QGraphicsItem.ItemIsSelectable)


def test_delete_key_requests_deletion_without_removing(scene):
    requested = []
    scene.shape_delete_requested.connect(requested.append)
    scene.set_interactive(True)
    scene.draw_trace(MeasurementKind.LINEAR, [(0, 0), (10, 0)])
    item = scene.commit_trace("t1:m1")
    item.setSelected(True)

    press(scene, Qt.Key_Delete)
    assert requested == ["t1:m1"]
    assert scene.has_shape("t1:m1")


def test_delete_key_ignored_when_not_interactive(scene):
    requested = []
    scene.shape_delete_requested.connect(requested.append)
    scene.draw_trace(MeasurementKind.LINEAR, [(0, 0), (10, 0)])
    scene.commit_trace("t1:m1")

    press(scene, Qt.Key_Backspace)
    assert requested == []


def test_document_background(scene):
    assert not scene.has_document()
    scene.set_document(QPixmap(800, 600))
    assert scene.has_document()
    assert scene.sceneRect().width() == 800

    scene.clear_document()
    assert not scene.has_document()
    assert scene.items() == []
