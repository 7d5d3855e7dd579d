# -*- coding: utf-8 -*-
"""
MeasurementKind and TakeoffStatus — enums shared by the domain entities.

No Qt dependency.
"""

from enum import Enum


class MeasurementKind(Enum):
    """Kind of quantity a measurement (and its take-off) carries.

    AREA   — closed polygon, measured in square metres
    LINEAR — open polyline, measured in metres
    COUNT  — point marker, one unit per click
    """
    AREA   = "area"
    LINEAR = "linear"
    COUNT  = "count"

    @property
    def unit(self) -> str:
        return _UNITS[self]

    @property
    def geometry_type(self) -> str:
        return _GEOMETRY_TYPES[self]


class TakeoffStatus(Enum):
    """Lifecycle of a take-off: pending until a measurement is attached."""
    PENDING  = "pending"
    COMPLETE = "complete"


_UNITS = {
    MeasurementKind.AREA:   "m²",
    MeasurementKind.LINEAR: "m",
    MeasurementKind.COUNT:  "count",
}

_GEOMETRY_TYPES = {
    MeasurementKind.AREA:   "polygon",
    MeasurementKind.LINEAR: "polyline",
    MeasurementKind.COUNT:  "marker",
}
