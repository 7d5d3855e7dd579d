# -*- coding: utf-8 -*-
"""Use cases package — exports all commands and use case classes."""

from .commands import (
    CreateTakeoffCommand,
    AttachMeasurementCommand,
    DeleteMeasurementCommand,
    DeleteTakeoffCommand,
    ClearMeasurementsCommand,
    SaveTakeoffCommand,
)
from .create_takeoff import CreateTakeoff
from .attach_measurement import AttachMeasurement
from .delete_measurement import DeleteMeasurement
from .delete_takeoff import DeleteTakeoff
from .clear_measurements import ClearMeasurements
from .save_takeoff import SaveTakeoff
from .load_takeoffs import LoadTakeoffs

__all__ = [
    'CreateTakeoffCommand',
    'AttachMeasurementCommand',
    'DeleteMeasurementCommand',
    'DeleteTakeoffCommand',
    'ClearMeasurementsCommand',
    'SaveTakeoffCommand',
    'CreateTakeoff',
    'AttachMeasurement',
    'DeleteMeasurement',
    'DeleteTakeoff',
    'ClearMeasurements',
    'SaveTakeoff',
    'LoadTakeoffs',
]
