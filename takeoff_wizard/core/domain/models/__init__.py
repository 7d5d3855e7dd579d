# -*- coding: utf-8 -*-
from .measurement_kind import MeasurementKind, TakeoffStatus
from .measurement import Measurement, Geometry
from .takeoff import Takeoff

__all__ = ["MeasurementKind", "TakeoffStatus", "Measurement", "Geometry", "Takeoff"]
