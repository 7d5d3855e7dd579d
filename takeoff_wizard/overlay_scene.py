# -*- coding: utf-8 -*-
"""
Overlay Scene Module
Retained-mode drawing surface laid over the rendered drawing page.

The scene holds:
  - an optional page background (QGraphicsPixmapItem) from the document
    renderer,
  - one committed shape per measurement, keyed by measurement id,
  - at most one transient trace item for the shape being captured or
    waiting for a name.

The scene never deletes a committed shape on its own: Delete/Backspace on a
selected shape only emits shape_delete_requested, and the controller removes
the shape once the ledger has removed the measurement.
"""

from PyQt5.QtCore import Qt, QPointF, QRectF, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainterPath, QPen, QFont
from PyQt5.QtWidgets import (
    QGraphicsScene, QGraphicsItem, QGraphicsPathItem, QGraphicsEllipseItem,
    QGraphicsPixmapItem, QGraphicsSimpleTextItem
)

from .core.domain.models.measurement_kind import MeasurementKind

MEASUREMENT_ID_ROLE = 0
MARKER_RADIUS = 10.0

DOCUMENT_Z = -1
SHAPE_Z = 1
TRACE_Z = 2


class TakeoffOverlayScene(QGraphicsScene):
    """Overlay surface mirroring the measurements held by the ledger."""

    shape_delete_requested = pyqtSignal(str)

    AREA_COLOR = QColor(59, 130, 246)
    LINEAR_COLOR = QColor(16, 185, 129)
    COUNT_COLOR = QColor(220, 38, 38)

    def __init__(self, parent=None):
        super(TakeoffOverlayScene, self).__init__(parent)
        self._shapes = {}
        self._trace_item = None
        self._trace_kind = None
        self._trace_points = ()
        self._document_item = None
        self._interactive = False
        self._surface_size = (0.0, 0.0)

    # ------------------------------------------------------------------ #
    #  Document background
    # ------------------------------------------------------------------ #

    def set_document(self, pixmap):
        """Show a rendered page under the overlay (replaces the previous one)."""
        self.clear_document()
        self._document_item = QGraphicsPixmapItem(pixmap)
        self._document_item.setZValue(DOCUMENT_Z)
        self._document_item.setFlag(QGraphicsItem.ItemIsSelectable, False)
        self.addItem(self._document_item)
        self._update_scene_rect()

    def clear_document(self):
        if self._document_item is not None:
            self.removeItem(self._document_item)
            self._document_item = None
            self._update_scene_rect()

    def has_document(self):
        return self._document_item is not None

    # ------------------------------------------------------------------ #
    #  Surface
    # ------------------------------------------------------------------ #

    def resize_surface(self, width, height):
        """Match the surface to its container.

        Item coordinates are left untouched so every committed shape stays
        anchored to the page.
        """
        self._surface_size = (max(0.0, float(width)), max(0.0, float(height)))
        self._update_scene_rect()

    def set_interactive(self, interactive):
        """Make committed shapes selectable (pointer tool) or inert (tracing tools)."""
        self._interactive = bool(interactive)
        for item in self._shapes.values():
            item.setFlag(QGraphicsItem.ItemIsSelectable, self._interactive)
            if not self._interactive:
                item.setSelected(False)

    def is_interactive(self):
        return self._interactive

    def _update_scene_rect(self):
        width, height = self._surface_size
        rect = QRectF(0, 0, width, height)
        if self._document_item is not None:
            rect = rect.united(self._document_item.boundingRect())
        self.setSceneRect(rect)

    # ------------------------------------------------------------------ #
    #  Transient trace
    # ------------------------------------------------------------------ #

    def draw_trace(self, kind, points, closed=False):
        """Draw (or redraw) the shape currently being captured.

        Args:
            kind:   MeasurementKind of the active tool
            points: sequence of (x, y) scene points
            closed: bool — close an area ring (shape finalized and pending)
        """
        self.clear_trace()
        if not points:
            return
        kind = MeasurementKind(kind)
        self._trace_kind = kind
        self._trace_points = tuple((float(x), float(y)) for x, y in points)
        self._trace_item = self._build_item(kind, self._trace_points, closed=closed)
        self._trace_item.setPen(self._trace_pen(kind))
        self._trace_item.setZValue(TRACE_Z)
        self.addItem(self._trace_item)

    def clear_trace(self):
        """Remove the transient trace, if any."""
        if self._trace_item is not None:
            self.removeItem(self._trace_item)
        self._trace_item = None
        self._trace_kind = None
        self._trace_points = ()

    def has_trace(self):
        return self._trace_item is not None

    def commit_trace(self, measurement_id):
        """Turn the transient trace into the committed shape of a measurement.

        Raises:
            RuntimeError: there is no trace to commit.
        """
        if self._trace_item is None:
            raise RuntimeError("There is no traced shape to commit.")
        kind, points = self._trace_kind, self._trace_points
        self.clear_trace()
        return self._add_committed(measurement_id, kind, points)

    # ------------------------------------------------------------------ #
    #  Committed shapes
    # ------------------------------------------------------------------ #

    def add_shape(self, measurement):
        """Add the committed shape of an existing measurement (e.g. on load)."""
        return self._add_committed(
            measurement.id, measurement.kind, measurement.geometry.points
        )

    def remove_shape(self, measurement_id):
        """Remove one committed shape. Returns True if it existed."""
        item = self._shapes.pop(measurement_id, None)
        if item is None:
            return False
        self.removeItem(item)
        return True

    def remove_shapes(self, measurement_ids):
        """Remove several committed shapes. Returns how many were removed."""
        return sum(1 for mid in list(measurement_ids) if self.remove_shape(mid))

    def has_shape(self, measurement_id):
        return measurement_id in self._shapes

    def shape_ids(self):
        return list(self._shapes.keys())

    def selected_measurement_ids(self):
        """Measurement ids of the selected committed shapes."""
        ids = []
        for item in self.selectedItems():
            mid = item.data(MEASUREMENT_ID_ROLE)
            if mid and mid in self._shapes:
                ids.append(mid)
        return ids

    def _add_committed(self, measurement_id, kind, points):
        self.remove_shape(measurement_id)
        kind = MeasurementKind(kind)
        item = self._build_item(kind, points, closed=kind is MeasurementKind.AREA)
        item.setPen(self._committed_pen(kind))
        if kind is MeasurementKind.AREA:
            fill = QColor(self.AREA_COLOR)
            fill.setAlpha(51)
            item.setBrush(QBrush(fill))
        item.setZValue(SHAPE_Z)
        item.setData(MEASUREMENT_ID_ROLE, measurement_id)
        item.setToolTip(measurement_id)
        item.setFlag(QGraphicsItem.ItemIsSelectable, self._interactive)
        self.addItem(item)
        self._shapes[measurement_id] = item
        return item

    # ------------------------------------------------------------------ #
    #  Events
    # ------------------------------------------------------------------ #

    def keyPressEvent(self, event):
        """Delete/Backspace requests deletion of the selected shapes."""
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace) and self._interactive:
            ids = self.selected_measurement_ids()
            if ids:
                for mid in ids:
                    self.shape_delete_requested.emit(mid)
                event.accept()
                return
        super(TakeoffOverlayScene, self).keyPressEvent(event)

    # ------------------------------------------------------------------ #
    #  Item builders
    # ------------------------------------------------------------------ #

    def _build_item(self, kind, points, closed=False):
        if kind is MeasurementKind.COUNT:
            return self._build_marker(points[0])
        path = QPainterPath()
        path.moveTo(QPointF(*points[0]))
        for x, y in points[1:]:
            path.lineTo(QPointF(x, y))
        if closed and len(points) >= 3:
            path.closeSubpath()
        return QGraphicsPathItem(path)

    def _build_marker(self, point):
        """Red circle with a white "1" centred on the clicked point."""
        x, y = point
        marker = QGraphicsEllipseItem(
            x - MARKER_RADIUS, y - MARKER_RADIUS, 2 * MARKER_RADIUS, 2 * MARKER_RADIUS
        )
        fill = QColor(self.COUNT_COLOR)
        fill.setAlpha(204)
        marker.setBrush(QBrush(fill))

        label = QGraphicsSimpleTextItem("1", marker)
        font = QFont()
        font.setPointSize(8)
        font.setBold(True)
        label.setFont(font)
        label.setBrush(QBrush(QColor("white")))
        bounds = label.boundingRect()
        label.setPos(x - bounds.width() / 2, y - bounds.height() / 2)
        return marker

    def _kind_color(self, kind):
        return {
            MeasurementKind.AREA: self.AREA_COLOR,
            MeasurementKind.LINEAR: self.LINEAR_COLOR,
            MeasurementKind.COUNT: self.COUNT_COLOR,
        }[kind]

    def _committed_pen(self, kind):
        pen = QPen(self._kind_color(kind), 2)
        pen.setCosmetic(True)
        return pen

    def _trace_pen(self, kind):
        pen = QPen(self._kind_color(kind), 2, Qt.DashLine)
        pen.setCosmetic(True)
        return pen
