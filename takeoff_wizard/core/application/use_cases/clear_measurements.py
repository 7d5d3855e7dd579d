# -*- coding: utf-8 -*-
"""
ClearMeasurements — use case removing every measurement from the drawing.

Business rules:
  - Locked take-offs keep their measurements and are reported as skipped.
  - Take-offs themselves are kept; they revert to pending.
"""

from .commands import ClearMeasurementsCommand


class ClearMeasurements:
    """Use case: clear all measurements (optionally for selected take-offs).

    Args:
        ledger:  TakeoffLedger instance.
        overlay: overlay surface (optional).
    """

    def __init__(self, ledger, overlay=None):
        self._ledger = ledger
        self._overlay = overlay

    def execute(self, cmd: ClearMeasurementsCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: removed (measurement ids), skipped (locked take-off ids).

        Raises:
            KeyError: a requested take-off does not exist.
        """
        if cmd.takeoff_ids is None:
            takeoffs = self._ledger.takeoffs()
        else:
            takeoffs = [self._ledger.get_takeoff(tid) for tid in cmd.takeoff_ids]

        removed = []
        skipped = []
        for takeoff in takeoffs:
            if takeoff.locked:
                skipped.append(takeoff.id)
                continue
            for measurement_id in takeoff.measurement_ids:
                self._ledger.delete_measurement(measurement_id)
                removed.append(measurement_id)

        if self._overlay is not None:
            self._overlay.remove_shapes(removed)

        return {'removed': removed, 'skipped': skipped}
