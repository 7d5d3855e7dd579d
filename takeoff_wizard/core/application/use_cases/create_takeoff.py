# -*- coding: utf-8 -*-
"""
CreateTakeoff — use case for adding a new, empty take-off to the ledger.

Business rules:
  - The name must not be blank.
  - The kind must be one of area / linear / count.
  - A new take-off starts pending with a zero quantity.

Raises:
  - ValueError: blank name or unknown kind.
"""

from .commands import CreateTakeoffCommand


class CreateTakeoff:
    """Use case: create an empty take-off.

    Args:
        ledger: TakeoffLedger instance.
    """

    def __init__(self, ledger):
        self._ledger = ledger

    def execute(self, cmd: CreateTakeoffCommand) -> dict:
        """Execute the use case.

        Returns:
            dict: takeoff_id, name, kind, status, quantity, unit.

        Raises:
            ValueError: blank name or unknown kind.
        """
        takeoff = self._ledger.create_takeoff(
            cmd.name, cmd.kind,
            wbs_element=cmd.wbs_element,
            drawing=cmd.drawing,
        )
        return {
            'takeoff_id': takeoff.id,
            'name':       takeoff.name,
            'kind':       takeoff.kind.value,
            'status':     takeoff.status.value,
            'quantity':   takeoff.quantity,
            'unit':       takeoff.unit,
        }
