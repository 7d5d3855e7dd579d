# -*- coding: utf-8 -*-
"""
DeleteMeasurement — use case removing one measurement and its shape.

The ledger is updated first; the overlay shape is removed only once the
ledger accepted the deletion, so the two never disagree.

Raises:
  - KeyError:   unknown measurement.
  - ValueError: owning take-off is locked.
"""

from .commands import DeleteMeasurementCommand


class DeleteMeasurement:
    """Use case: delete a measurement.

    Args:
        ledger:  TakeoffLedger instance.
        overlay: overlay surface (optional).
    """

    def __init__(self, ledger, overlay=None):
        self._ledger = ledger
        self._overlay = overlay

    def execute(self, cmd: DeleteMeasurementCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: measurement_id, takeoff_id, quantity, status.
        """
        takeoff = self._ledger.owner_of(cmd.measurement_id)
        self._ledger.delete_measurement(cmd.measurement_id)

        if self._overlay is not None:
            self._overlay.remove_shape(cmd.measurement_id)

        return {
            'measurement_id': cmd.measurement_id,
            'takeoff_id':     takeoff.id,
            'quantity':       takeoff.quantity,
            'status':         takeoff.status.value,
        }
