# -*- coding: utf-8 -*-
"""
SaveTakeoff — use case queuing take-off records for persistence.

The record snapshot is taken synchronously, so the operator can keep tracing
while the write runs in the background. A failed write does not roll back the
in-memory ledger; the notifier tells the operator, who can save again.

Raises:
  - KeyError: a requested take-off does not exist.
"""

from .commands import SaveTakeoffCommand


class SaveTakeoff:
    """Use case: persist take-offs in the background.

    Args:
        ledger:      TakeoffLedger instance.
        persistence: BackgroundPersistence instance — required.
    """

    def __init__(self, ledger, persistence):
        if persistence is None:
            raise RuntimeError("SaveTakeoff requires a persistence instance.")
        self._ledger = ledger
        self._persistence = persistence

    def execute(self, cmd: SaveTakeoffCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: takeoff_ids (list), futures (dict id -> Future).
        """
        if cmd.takeoff_ids:
            takeoffs = [self._ledger.get_takeoff(tid) for tid in cmd.takeoff_ids]
        else:
            takeoffs = self._ledger.takeoffs()

        futures = {}
        for takeoff in takeoffs:
            futures[takeoff.id] = self._persistence.submit_save(takeoff.to_record())

        return {
            'takeoff_ids': [t.id for t in takeoffs],
            'futures':     futures,
        }
