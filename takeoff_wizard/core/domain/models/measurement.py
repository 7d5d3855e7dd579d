# -*- coding: utf-8 -*-
"""
Measurement — domain entity representing one immutable traced quantity.

Once created, a measurement is never edited: its value is derived from its
geometry and the scale active at capture time. Changing a measurement means
deleting it and capturing a new one.

No Qt dependency. No database access.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ....geometry_utils import compute_value, validate_scale
from .measurement_kind import MeasurementKind

ID_SEPARATOR = ':'

Point = Tuple[float, float]


@dataclass(frozen=True)
class Geometry:
    """Value object: the shape a measurement was computed from.

    Attributes:
        kind:   MeasurementKind the points describe.
        points: Tuple of (x, y) points in drawing-surface coordinates.
                A polygon ring is implicitly closed.
    """

    kind: MeasurementKind
    points: Tuple[Point, ...]

    @property
    def geometry_type(self) -> str:
        """'polygon', 'polyline' or 'marker'."""
        return self.kind.geometry_type

    @classmethod
    def from_points(cls, kind: MeasurementKind, points) -> 'Geometry':
        """Freeze a mutable point list into a Geometry."""
        return cls(kind=kind, points=tuple((float(x), float(y)) for x, y in points))

    def to_list(self) -> list:
        return [[x, y] for x, y in self.points]


@dataclass(frozen=True)
class Measurement:
    """A labelled quantity traced on the drawing.

    Attributes:
        id:         "<takeoff_id>:<hex>" — the owning take-off namespaces it.
        kind:       MeasurementKind.
        label:      Operator-supplied name.
        value:      Quantity in the kind's unit, rounded to 2 dp.
        geometry:   The owned shape (by value, never shared).
        scale:      Pixels per unit active when the shape was captured.
        created_at: ISO-8601 timestamp.
        source:     'manual' for traced shapes, 'auto' for imported ones.
    """

    id: str
    kind: MeasurementKind
    label: str
    value: float
    geometry: Geometry
    scale: float
    created_at: str = ''
    source: str = 'manual'

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def unit(self) -> str:
        return self.kind.unit

    @property
    def takeoff_id(self) -> str:
        """Id of the owning take-off, parsed from the namespaced id."""
        return self.id.split(ID_SEPARATOR, 1)[0]

    def __str__(self) -> str:
        return f"{self.label}: {self.value} {self.unit}"

    # ------------------------------------------------------------------ #
    #  Factory helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def make_id(takeoff_id: str) -> str:
        return f"{takeoff_id}{ID_SEPARATOR}{uuid.uuid4().hex}"

    @classmethod
    def create(cls, takeoff_id: str, label: str, geometry: Geometry,
               scale: float, value: Optional[float] = None,
               source: str = 'manual') -> 'Measurement':
        """Build a measurement for a take-off, deriving its value.

        Args:
            takeoff_id: Owner id used to namespace the measurement id.
            label:      Operator-supplied name (must not be blank).
            geometry:   Frozen shape.
            scale:      Pixels per unit at capture time.
            value:      Precomputed value; recomputed from geometry when None.

        Raises:
            ValueError: blank label or invalid scale.
        """
        label = (label or '').strip()
        if not label:
            raise ValueError("Please enter a measurement name.")
        if value is None:
            value = compute_value(geometry.kind.value, geometry.points, scale)
        return cls(
            id=cls.make_id(takeoff_id),
            kind=geometry.kind,
            label=label,
            value=round(float(value), 2),
            geometry=geometry,
            scale=float(scale),
            created_at=datetime.now().isoformat(timespec='seconds'),
            source=source,
        )

    def to_record(self) -> dict:
        """Serialize to the persistence shape."""
        return {
            'id':         self.id,
            'kind':       self.kind.value,
            'label':      self.label,
            'value':      self.value,
            'unit':       self.unit,
            'geometry':   self.geometry.to_list(),
            'scale':      self.scale,
            'created_at': self.created_at,
            'source':     self.source,
        }

    @classmethod
    def from_record(cls, data: dict) -> 'Measurement':
        """Rebuild a measurement from a stored record (value is kept as stored).

        Raises:
            KeyError:   id, kind or scale is missing.
            ValueError: unknown kind or a scale that is not a positive number.
        """
        kind = MeasurementKind(data['kind'])
        return cls(
            id=data['id'],
            kind=kind,
            label=data.get('label', ''),
            value=float(data.get('value', 0.0)),
            geometry=Geometry.from_points(kind, data.get('geometry', [])),
            scale=validate_scale(data['scale']),
            created_at=data.get('created_at', ''),
            source=data.get('source', 'manual'),
        )
