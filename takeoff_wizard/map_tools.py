# -*- coding: utf-8 -*-
"""
Map Tools Module
Canvas view dispatching press / move / release events to the take-off
executor in scene (drawing-page) coordinates.
"""

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPainter
from PyQt5.QtWidgets import QGraphicsView

from .core.capture_engine import Tool


class TakeoffCanvasView(QGraphicsView):
    """Graphics view showing the overlay scene of a TakeoffExecutor.

    Emits:
        shape_pending(object) — a PendingShape is waiting for a label
        cancelled()           — Escape discarded a trace or pending shape
    """

    shape_pending = pyqtSignal(object)
    cancelled = pyqtSignal()

    def __init__(self, executor, parent=None):
        """
        Args:
            executor: TakeoffExecutor — receives pointer events
            parent:   QWidget
        """
        super(TakeoffCanvasView, self).__init__(executor.scene, parent)
        self.executor = executor
        self.setRenderHint(QPainter.Antialiasing)
        self.setMouseTracking(False)
        self.setFocusPolicy(Qt.StrongFocus)
        self.executor.pending_changed.connect(self._on_pending_changed)
        self.update_cursor()

    def update_cursor(self):
        """Crosshair while a tracing tool is active, arrow for the pointer."""
        if self.executor.tool is Tool.POINTER:
            self.viewport().setCursor(Qt.ArrowCursor)
            self.setDragMode(QGraphicsView.RubberBandDrag)
        else:
            self.viewport().setCursor(Qt.CrossCursor)
            self.setDragMode(QGraphicsView.NoDrag)

    # ------------------------------------------------------------------ #
    #  Mouse events
    # ------------------------------------------------------------------ #

    def mousePressEvent(self, event):
        """Start a trace or drop a count marker."""
        if event.button() == Qt.LeftButton and self.executor.tool is not Tool.POINTER:
            point = self.mapToScene(event.pos())
            if self.executor.pointer_down(point.x(), point.y()):
                event.accept()
                return
        super(TakeoffCanvasView, self).mousePressEvent(event)

    def mouseMoveEvent(self, event):
        """Extend the trace while the button is held."""
        if event.buttons() & Qt.LeftButton and self.executor.tool.is_tracing:
            point = self.mapToScene(event.pos())
            if self.executor.pointer_move(point.x(), point.y()):
                event.accept()
                return
        super(TakeoffCanvasView, self).mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        """Finalize the trace."""
        if event.button() == Qt.LeftButton and self.executor.tool is not Tool.POINTER:
            point = self.mapToScene(event.pos())
            self.executor.pointer_up(point.x(), point.y())
            event.accept()
            return
        super(TakeoffCanvasView, self).mouseReleaseEvent(event)

    def keyPressEvent(self, event):
        """Escape cancels; other keys go to the scene (Delete on selection)."""
        if event.key() == Qt.Key_Escape:
            if self.executor.cancel_pending():
                self.cancelled.emit()
            event.accept()
            return
        super(TakeoffCanvasView, self).keyPressEvent(event)

    def resizeEvent(self, event):
        """Keep the overlay surface the size of the viewport."""
        super(TakeoffCanvasView, self).resizeEvent(event)
        size = self.viewport().size()
        self.executor.scene.resize_surface(size.width(), size.height())

    # ------------------------------------------------------------------ #
    #  Executor signals
    # ------------------------------------------------------------------ #

    def _on_pending_changed(self, shape):
        if shape is not None:
            self.shape_pending.emit(shape)
