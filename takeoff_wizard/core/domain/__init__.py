# -*- coding: utf-8 -*-
"""
Domain package — pure Python take-off entities.

Rules:
  - No Qt imports anywhere in this package
  - No database imports anywhere in this package
  - Only IDs, names, enums, frozen geometry and derived quantities

Public API:
    MeasurementKind — enum: AREA | LINEAR | COUNT
    TakeoffStatus   — enum: PENDING | COMPLETE
    Geometry        — value object: frozen point sequence of a shape
    Measurement     — entity: an immutable traced quantity
    Takeoff         — aggregate: a named group of measurements of one kind
"""

from .models.measurement_kind import MeasurementKind, TakeoffStatus
from .models.measurement import Measurement, Geometry
from .models.takeoff import Takeoff

__all__ = [
    "MeasurementKind",
    "TakeoffStatus",
    "Geometry",
    "Measurement",
    "Takeoff",
]
