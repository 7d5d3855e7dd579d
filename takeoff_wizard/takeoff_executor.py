# -*- coding: utf-8 -*-
"""
Take-off Executor Module
Overlay controller: wires the capture engine, the take-off ledger, the overlay
scene and background persistence together.

Pointer events from the canvas view arrive here in scene coordinates, are fed
to the CaptureEngine, and the transient trace on the overlay is redrawn from
the engine state after every event. Ledger-changing operations run through
the application use cases; errors (ValueError / KeyError / RuntimeError)
propagate to the form, which shows them in a QMessageBox.
"""

from PyQt5.QtCore import QObject, pyqtSignal

from .core.application import (
    BackgroundPersistence,
    CreateTakeoffCommand, AttachMeasurementCommand, DeleteMeasurementCommand,
    DeleteTakeoffCommand, ClearMeasurementsCommand, SaveTakeoffCommand,
    CreateTakeoff, AttachMeasurement, DeleteMeasurement, DeleteTakeoff,
    ClearMeasurements, SaveTakeoff, LoadTakeoffs,
)
from .core.capture_engine import CaptureEngine, CaptureState, Tool
from .core.ledger import TakeoffLedger
from .overlay_scene import TakeoffOverlayScene
from .takeoff_store import DEFAULT_PIXELS_PER_UNIT, default_data_dir


class TakeoffExecutor(QObject):
    """Controller owning one capture session over one overlay scene."""

    # PendingShape, or None when the pending shape went away
    pending_changed = pyqtSignal(object)
    takeoffs_changed = pyqtSignal()
    # Operator-facing messages
    save_failed = pyqtSignal(str)
    operation_failed = pyqtSignal(str)

    def __init__(self, scene=None, data_dir=None, scale=DEFAULT_PIXELS_PER_UNIT,
                 persistence=None, parent=None):
        """
        Args:
            scene:       TakeoffOverlayScene or None (a new one is created)
            data_dir:    str — directory holding takeoffs.sqlite
            scale:       float — initial pixels per unit
            persistence: BackgroundPersistence or None (created for data_dir)
            parent:      QObject parent
        """
        super(TakeoffExecutor, self).__init__(parent)
        self.data_dir = data_dir or default_data_dir()
        self.scene = scene if scene is not None else TakeoffOverlayScene()
        self.engine = CaptureEngine(scale, document_available=self.scene.has_document())
        self.ledger = TakeoffLedger()
        self.persistence = persistence or BackgroundPersistence(self.data_dir)
        self.persistence.set_notifier(self.save_failed.emit)

        self.scene.set_interactive(self.engine.tool is Tool.POINTER)
        self.scene.shape_delete_requested.connect(self._on_shape_delete_requested)

    # ------------------------------------------------------------------ #
    #  Document and configuration
    # ------------------------------------------------------------------ #

    def set_document(self, pixmap):
        """Show a rendered page and arm the tracing tools."""
        self.scene.set_document(pixmap)
        self.engine.set_document_available(True)

    def clear_document(self):
        """Remove the page; tracing tools become inert and a trace is aborted."""
        self.scene.clear_document()
        if self.engine.set_document_available(False):
            self.scene.clear_trace()

    def select_tool(self, tool):
        """Activate a tool; a trace or pending shape in progress is discarded.

        Returns:
            bool: True if something was discarded.
        """
        had_pending = self.engine.pending is not None
        discarded = self.engine.select_tool(tool)
        self.scene.clear_trace()
        self.scene.set_interactive(self.engine.tool is Tool.POINTER)
        if had_pending:
            self.pending_changed.emit(None)
        return discarded

    def set_scale(self, value, remember=True):
        """Change the pixels-per-unit scale for future measurements.

        Existing measurements keep the scale they were captured with.

        Raises:
            ValueError: value is not a positive number; previous scale kept.
        """
        scale = self.engine.set_scale(value)
        if remember:
            self.persistence.submit_scale(scale)
        return scale

    @property
    def scale(self):
        return self.engine.scale

    @property
    def tool(self):
        return self.engine.tool

    # ------------------------------------------------------------------ #
    #  Pointer events
    # ------------------------------------------------------------------ #

    def pointer_down(self, x, y):
        consumed = self.engine.pointer_down(x, y)
        if consumed:
            self._refresh_trace()
        return consumed

    def pointer_move(self, x, y):
        consumed = self.engine.pointer_move(x, y)
        if consumed:
            self._refresh_trace()
        return consumed

    def pointer_up(self, x=None, y=None):
        """Finalize the trace; returns the PendingShape or None."""
        if self.engine.state is not CaptureState.CAPTURING:
            return None
        shape = self.engine.pointer_up(x, y)
        self._refresh_trace()
        return shape

    def _refresh_trace(self):
        state = self.engine.state
        if state is CaptureState.CAPTURING:
            self.scene.draw_trace(self.engine.tool.kind, self.engine.points)
        elif state is CaptureState.PENDING_CONFIRMATION:
            pending = self.engine.pending
            self.scene.draw_trace(pending.kind, pending.geometry.points, closed=True)
            self.pending_changed.emit(pending)
        else:
            self.scene.clear_trace()

    # ------------------------------------------------------------------ #
    #  Pending shape
    # ------------------------------------------------------------------ #

    @property
    def pending(self):
        return self.engine.pending

    def confirm_pending(self, takeoff_id, label):
        """Name the pending shape and attach it to a take-off.

        Raises:
            RuntimeError: nothing pending.
            ValueError:   blank label, unknown, locked or mismatched take-off;
                          the shape stays pending.
        """
        result = AttachMeasurement(self.ledger, self.engine, self.scene).execute(
            AttachMeasurementCommand(takeoff_id=takeoff_id, label=label)
        )
        self.pending_changed.emit(None)
        self.takeoffs_changed.emit()
        return result

    def cancel_pending(self):
        """Discard the pending shape or trace in progress (Escape / dialog cancel)."""
        discarded = self.engine.cancel()
        self.scene.clear_trace()
        if discarded:
            self.pending_changed.emit(None)
        return discarded

    def compatible_takeoffs(self, kind=None):
        """Unlocked take-offs that can receive a shape of the given kind."""
        if kind is None:
            if self.engine.pending is None:
                return []
            kind = self.engine.pending.kind
        return [t for t in self.ledger.takeoffs()
                if t.kind is kind and not t.locked]

    # ------------------------------------------------------------------ #
    #  Take-offs
    # ------------------------------------------------------------------ #

    def create_takeoff(self, name, kind, wbs_element='', drawing=''):
        result = CreateTakeoff(self.ledger).execute(CreateTakeoffCommand(
            name=name, kind=kind, wbs_element=wbs_element, drawing=drawing
        ))
        self.takeoffs_changed.emit()
        return result

    def delete_measurement(self, measurement_id):
        result = DeleteMeasurement(self.ledger, self.scene).execute(
            DeleteMeasurementCommand(measurement_id=measurement_id)
        )
        self.takeoffs_changed.emit()
        return result

    def delete_takeoff(self, takeoff_id):
        """Delete a take-off, its measurements, their shapes and its stored record."""
        result = DeleteTakeoff(self.ledger, self.scene, self.persistence).execute(
            DeleteTakeoffCommand(takeoff_id=takeoff_id)
        )
        self.takeoffs_changed.emit()
        return result

    def clear_measurements(self, takeoff_ids=None):
        result = ClearMeasurements(self.ledger, self.scene).execute(
            ClearMeasurementsCommand(takeoff_ids=takeoff_ids)
        )
        self.takeoffs_changed.emit()
        return result

    def set_locked(self, takeoff_id, locked):
        takeoff = self.ledger.set_locked(takeoff_id, locked)
        self.takeoffs_changed.emit()
        return takeoff

    def save(self, takeoff_ids=None):
        """Queue background saves; returns the SaveTakeoff result with futures."""
        return SaveTakeoff(self.ledger, self.persistence).execute(
            SaveTakeoffCommand(takeoff_ids=list(takeoff_ids or []))
        )

    def load(self):
        """Load stored take-offs and the stored scale.

        Raises:
            RuntimeError: the take-off database could not be read.
        """
        result = LoadTakeoffs(self.ledger, self.data_dir, self.scene).execute()
        self.engine.set_scale(result['scale'])
        self.takeoffs_changed.emit()
        return result

    def summary(self):
        return self.ledger.summary()

    def shutdown(self, wait=True):
        """Wait for queued saves and stop the save worker."""
        self.persistence.shutdown(wait=wait)

    # ------------------------------------------------------------------ #
    #  Overlay requests
    # ------------------------------------------------------------------ #

    def _on_shape_delete_requested(self, measurement_id):
        try:
            self.delete_measurement(measurement_id)
        except (KeyError, ValueError) as e:
            message = str(e).strip("'\"")
            print(f"Warning: Could not delete measurement {measurement_id}: {message}")
            self.operation_failed.emit(message)
