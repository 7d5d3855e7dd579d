# -*- coding: utf-8 -*-
"""
DeleteTakeoff — use case removing a take-off with all of its measurements.

Business rules:
  - Locked take-offs cannot be deleted.
  - The take-off leaves the ledger in one step, then every shape it owned is
    removed from the overlay before control returns to the event loop, so no
    half-deleted state is ever visible.
  - When persistence is configured, the stored record is deleted in the
    background. Document pages are never touched.

Raises:
  - KeyError:   unknown take-off.
  - ValueError: take-off is locked.
"""

from .commands import DeleteTakeoffCommand


class DeleteTakeoff:
    """Use case: cascade-delete a take-off.

    Args:
        ledger:      TakeoffLedger instance.
        overlay:     overlay surface (optional).
        persistence: BackgroundPersistence (optional).
    """

    def __init__(self, ledger, overlay=None, persistence=None):
        self._ledger = ledger
        self._overlay = overlay
        self._persistence = persistence

    def execute(self, cmd: DeleteTakeoffCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: takeoff_id, name, measurement_ids, future (or None).
        """
        takeoff = self._ledger.delete_takeoff(cmd.takeoff_id)
        measurement_ids = takeoff.measurement_ids

        if self._overlay is not None:
            self._overlay.remove_shapes(measurement_ids)

        future = None
        if self._persistence is not None:
            future = self._persistence.submit_delete(takeoff.id, takeoff.name)

        return {
            'takeoff_id':      takeoff.id,
            'name':            takeoff.name,
            'measurement_ids': measurement_ids,
            'future':          future,
        }
