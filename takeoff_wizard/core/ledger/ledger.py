# -*- coding: utf-8 -*-
"""
TakeoffLedger — in-memory source of truth for take-offs and their measurements.

The overlay only mirrors what the ledger holds: every shape removed from the
overlay corresponds to exactly one measurement removed here.

Each take-off's quantity is derived from its measurements on read, so it is
always exactly the sum of the attached values.
"""

from collections import OrderedDict

from ..domain.models.measurement import ID_SEPARATOR
from ..domain.models.measurement_kind import MeasurementKind, TakeoffStatus
from ..domain.models.takeoff import Takeoff


class TakeoffLedger:
    """Named groups of measurements keyed by take-off id (insertion ordered)."""

    def __init__(self):
        self._takeoffs = OrderedDict()

    # ------------------------------------------------------------------ #
    #  Take-offs
    # ------------------------------------------------------------------ #

    def create_takeoff(self, name, kind, wbs_element='', drawing='') -> Takeoff:
        """Create a new, empty, pending take-off.

        Args:
            name:        str — must not be blank
            kind:        MeasurementKind or its string value
            wbs_element: str — optional cost breakdown element
            drawing:     str — optional sheet name

        Raises:
            ValueError: blank name or unknown kind.
        """
        name = (name or '').strip()
        if not name:
            raise ValueError("Please enter a take-off name.")
        takeoff = Takeoff(
            name=name,
            kind=MeasurementKind(kind),
            wbs_element=wbs_element or '',
            drawing=drawing or '',
        )
        self._takeoffs[takeoff.id] = takeoff
        return takeoff

    def restore(self, takeoff: Takeoff) -> Takeoff:
        """Insert a take-off loaded from storage (replaces one with the same id)."""
        self._takeoffs[takeoff.id] = takeoff
        return takeoff

    def get_takeoff(self, takeoff_id) -> Takeoff:
        """Return a take-off by id.

        Raises:
            KeyError: unknown id.
        """
        try:
            return self._takeoffs[takeoff_id]
        except KeyError:
            raise KeyError(f"Take-off '{takeoff_id}' not found.")

    def takeoffs(self):
        """All take-offs in creation order."""
        return list(self._takeoffs.values())

    def delete_takeoff(self, takeoff_id) -> Takeoff:
        """Remove a take-off and everything it owns in one step.

        Returns:
            Takeoff: the removed take-off (its measurements list is intact so
                     the caller can clear their shapes).

        Raises:
            KeyError:   unknown id.
            ValueError: locked take-off.
        """
        takeoff = self.get_takeoff(takeoff_id)
        if takeoff.locked:
            raise ValueError(f"Take-off '{takeoff.name}' is locked.")
        return self._takeoffs.pop(takeoff_id)

    def set_locked(self, takeoff_id, locked) -> Takeoff:
        takeoff = self.get_takeoff(takeoff_id)
        takeoff.locked = bool(locked)
        return takeoff

    # ------------------------------------------------------------------ #
    #  Measurements
    # ------------------------------------------------------------------ #

    def attach_measurement(self, takeoff_id, measurement) -> Takeoff:
        """Append a measurement; the take-off becomes complete.

        Raises:
            KeyError:   unknown take-off.
            ValueError: locked take-off, kind mismatch or foreign id.
        """
        takeoff = self.get_takeoff(takeoff_id)
        takeoff.add_measurement(measurement)
        return takeoff

    def delete_measurement(self, measurement_id):
        """Remove a measurement from its owning take-off.

        If that empties the take-off, its status reverts to pending.

        Returns:
            Measurement: the removed measurement.

        Raises:
            KeyError:   unknown measurement.
            ValueError: owning take-off is locked.
        """
        takeoff = self.owner_of(measurement_id)
        return takeoff.remove_measurement(measurement_id)

    def owner_of(self, measurement_id) -> Takeoff:
        """Return the take-off owning a measurement id.

        Raises:
            KeyError: no take-off owns it.
        """
        takeoff_id = measurement_id.split(ID_SEPARATOR, 1)[0]
        takeoff = self._takeoffs.get(takeoff_id)
        if takeoff is None or takeoff.find(measurement_id) is None:
            raise KeyError(f"Measurement '{measurement_id}' not found.")
        return takeoff

    def find_measurement(self, measurement_id):
        """Return the measurement or None."""
        try:
            return self.owner_of(measurement_id).find(measurement_id)
        except KeyError:
            return None

    def measurements(self):
        """Every attached measurement across all take-offs."""
        return [m for t in self._takeoffs.values() for m in t.measurements]

    # ------------------------------------------------------------------ #
    #  Statistics
    # ------------------------------------------------------------------ #

    def summary(self) -> dict:
        """Counts shown above the take-off list."""
        takeoffs = self.takeoffs()
        return {
            'total':    len(takeoffs),
            'complete': sum(1 for t in takeoffs if t.status is TakeoffStatus.COMPLETE),
            'pending':  sum(1 for t in takeoffs if t.status is TakeoffStatus.PENDING),
            'locked':   sum(1 for t in takeoffs if t.locked),
        }

    def __len__(self):
        return len(self._takeoffs)

    def __contains__(self, takeoff_id):
        return takeoff_id in self._takeoffs
