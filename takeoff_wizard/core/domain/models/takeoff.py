# -*- coding: utf-8 -*-
"""
Takeoff — aggregate root grouping measurements of one kind.

No Qt dependency. Status, total and quantity are always derived from the
attached measurements, never stored independently.

Terminology mapping:
    Form term            → Domain term
    "Take-off"           → Takeoff
    "Measurement"        → Measurement (owned by exactly one Takeoff)
    "WBS element"        → Takeoff.wbs_element
    "Drawing"            → Takeoff.drawing (sheet the quantities come from)
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from ....geometry_utils import format_quantity, QUANTITY_DECIMALS
from .measurement import Measurement, ID_SEPARATOR
from .measurement_kind import MeasurementKind, TakeoffStatus


@dataclass
class Takeoff:
    """A named aggregation of measurements sharing a kind.

    Attributes:
        name:          Operator-supplied name.
        kind:          MeasurementKind every attached measurement must share.
        id:            Hex uuid; namespaces the ids of owned measurements.
        measurements:  Owned measurements, in attach order.
        wbs_element:   Cost breakdown element this quantity feeds.
        drawing:       Drawing / sheet name the take-off was measured on.
        locked:        When True, the measurement list cannot change.
    """

    name: str
    kind: MeasurementKind
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    measurements: List[Measurement] = field(default_factory=list)
    wbs_element: str = ''
    drawing: str = ''
    locked: bool = False

    # ------------------------------------------------------------------ #
    #  Computed properties
    # ------------------------------------------------------------------ #

    @property
    def unit(self) -> str:
        return self.kind.unit

    @property
    def status(self) -> TakeoffStatus:
        """COMPLETE while at least one measurement is attached."""
        return TakeoffStatus.COMPLETE if self.measurements else TakeoffStatus.PENDING

    @property
    def total(self) -> float:
        """Exact sum of the attached measurement values (2 dp)."""
        return round(sum(m.value for m in self.measurements), QUANTITY_DECIMALS)

    @property
    def quantity(self) -> str:
        """Formatted running total in the take-off's unit."""
        return format_quantity(self.kind.value, self.total)

    @property
    def measurement_ids(self) -> List[str]:
        return [m.id for m in self.measurements]

    def owns(self, measurement_id: str) -> bool:
        """True when the id is namespaced under this take-off."""
        return measurement_id.startswith(f"{self.id}{ID_SEPARATOR}")

    def find(self, measurement_id: str) -> Optional[Measurement]:
        for m in self.measurements:
            if m.id == measurement_id:
                return m
        return None

    def __str__(self) -> str:
        return f"Takeoff({self.name!r}: {self.quantity} {self.unit}, {self.status.value})"

    # ------------------------------------------------------------------ #
    #  Mutations (called by the ledger only)
    # ------------------------------------------------------------------ #

    def add_measurement(self, measurement: Measurement) -> None:
        """Append a measurement after checking ownership, kind and lock.

        Raises:
            ValueError: locked take-off, foreign id, kind mismatch or duplicate.
        """
        self._ensure_unlocked()
        if not self.owns(measurement.id):
            raise ValueError(
                f"Measurement '{measurement.id}' does not belong to "
                f"take-off '{self.name}'."
            )
        if measurement.kind != self.kind:
            raise ValueError(
                f"Cannot attach a {measurement.kind.value} measurement to "
                f"{self.kind.value} take-off '{self.name}'."
            )
        if self.find(measurement.id) is not None:
            raise ValueError(f"Measurement '{measurement.id}' is already attached.")
        self.measurements.append(measurement)

    def remove_measurement(self, measurement_id: str) -> Measurement:
        """Remove and return a measurement.

        Raises:
            KeyError:   measurement not attached here.
            ValueError: locked take-off.
        """
        self._ensure_unlocked()
        measurement = self.find(measurement_id)
        if measurement is None:
            raise KeyError(measurement_id)
        self.measurements.remove(measurement)
        return measurement

    def _ensure_unlocked(self):
        if self.locked:
            raise ValueError(f"Take-off '{self.name}' is locked.")

    # ------------------------------------------------------------------ #
    #  Factory helpers
    # ------------------------------------------------------------------ #

    def to_record(self) -> dict:
        """Serialize to the persistence record shape."""
        return {
            'id':           self.id,
            'name':         self.name,
            'kind':         self.kind.value,
            'quantity':     self.quantity,
            'status':       self.status.value,
            'unit':         self.unit,
            'measurements': [m.to_record() for m in self.measurements],
            'wbs_element':  self.wbs_element,
            'drawing':      self.drawing,
            'locked':       self.locked,
        }

    @classmethod
    def from_record(cls, data: dict) -> 'Takeoff':
        """Build a Takeoff from a stored record.

        Stored quantity and status are ignored; both are recomputed from the
        measurements.
        """
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            kind=MeasurementKind(data['kind']),
            measurements=[Measurement.from_record(m) for m in data.get('measurements', [])],
            wbs_element=data.get('wbs_element', '') or '',
            drawing=data.get('drawing', '') or '',
            locked=bool(data.get('locked', False)),
        )
