# -*- coding: utf-8 -*-
"""
AttachMeasurement — use case that names the pending shape and files it.

Business rules:
  - A shape must be pending confirmation in the capture engine.
  - The target take-off must exist, be unlocked, and share the shape's kind.
  - The label must not be blank.
  - The measurement value is the one computed when the shape was finalized,
    with the scale active at that moment.

Steps:
  1. Validate the target take-off against the pending shape.
  2. Confirm the shape in the engine (engine returns to IDLE).
  3. Build the Measurement, namespaced by the take-off id.
  4. Attach it to the ledger (take-off becomes complete).
  5. Commit the transient overlay shape under the measurement id.

Raises:
  - RuntimeError: nothing pending.
  - ValueError:   unknown / locked / mismatched take-off, or blank label.
                  The shape stays pending so the operator can fix the input.
"""

from ...domain.models.measurement import Measurement
from .commands import AttachMeasurementCommand


class AttachMeasurement:
    """Use case: attach the pending shape as a measurement.

    Args:
        ledger:  TakeoffLedger instance.
        engine:  CaptureEngine holding the pending shape.
        overlay: overlay surface (optional — if None, no shape is committed).
    """

    def __init__(self, ledger, engine, overlay=None):
        self._ledger = ledger
        self._engine = engine
        self._overlay = overlay

    def execute(self, cmd: AttachMeasurementCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: measurement_id, takeoff_id, label, value, unit, scale,
                  quantity, status.
        """
        shape = self._engine.pending
        if shape is None:
            raise RuntimeError("There is no measurement waiting for a name.")

        takeoff = self._validate_takeoff(cmd.takeoff_id, shape)

        shape = self._engine.confirm(cmd.label)
        measurement = Measurement.create(
            takeoff.id, cmd.label, shape.geometry, shape.scale, value=shape.value
        )
        self._ledger.attach_measurement(takeoff.id, measurement)

        if self._overlay is not None:
            self._overlay.commit_trace(measurement.id)

        return {
            'measurement_id': measurement.id,
            'takeoff_id':     takeoff.id,
            'label':          measurement.label,
            'value':          measurement.value,
            'unit':           measurement.unit,
            'scale':          measurement.scale,
            'quantity':       takeoff.quantity,
            'status':         takeoff.status.value,
        }

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    def _validate_takeoff(self, takeoff_id, shape):
        if not takeoff_id or takeoff_id not in self._ledger:
            raise ValueError("Choose a take-off for this measurement.")
        takeoff = self._ledger.get_takeoff(takeoff_id)
        if takeoff.locked:
            raise ValueError(f"Take-off '{takeoff.name}' is locked.")
        if takeoff.kind != shape.kind:
            raise ValueError(
                f"Take-off '{takeoff.name}' collects {takeoff.kind.value} "
                f"measurements, not {shape.kind.value}."
            )
        return takeoff
