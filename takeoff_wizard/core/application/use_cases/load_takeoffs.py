# -*- coding: utf-8 -*-
"""
LoadTakeoffs — use case restoring stored take-offs into the ledger and overlay.

Stored values are kept as they were captured (each measurement carries its
own scale), so changing the current scale never alters loaded quantities.

Raises:
  - RuntimeError: the take-off database could not be read.
"""

from ...ledger.repository import TakeoffRepository


class LoadTakeoffs:
    """Use case: load every stored take-off.

    Args:
        ledger:   TakeoffLedger instance.
        data_dir: str — directory holding takeoffs.sqlite.
        overlay:  overlay surface (optional).
    """

    def __init__(self, ledger, data_dir, overlay=None):
        self._ledger = ledger
        self._data_dir = data_dir
        self._overlay = overlay

    def execute(self) -> dict:
        """Execute the use case.

        Returns:
            dict: takeoff_ids, measurement_count, scale (stored px per unit).
        """
        with TakeoffRepository(self._data_dir) as repo:
            takeoffs = repo.load_all()
            scale = repo.get_scale()

        measurement_count = 0
        for takeoff in takeoffs:
            # A reload replaces the in-memory take-off, so its old shapes go too.
            if self._overlay is not None and takeoff.id in self._ledger:
                previous = self._ledger.get_takeoff(takeoff.id)
                self._overlay.remove_shapes(previous.measurement_ids)
            self._ledger.restore(takeoff)
            for measurement in takeoff.measurements:
                if self._overlay is not None:
                    self._overlay.add_shape(measurement)
                measurement_count += 1

        return {
            'takeoff_ids':       [t.id for t in takeoffs],
            'measurement_count': measurement_count,
            'scale':             scale,
        }
