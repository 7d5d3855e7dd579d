# -*- coding: utf-8 -*-
"""
Command dataclasses — input DTOs for each use case.

Commands are plain data objects. They carry all information a use case needs
to execute one business operation.

No validation lives in commands — validation is the use case's responsibility.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CreateTakeoffCommand:
    """Command for the CreateTakeoff use case.

    Attributes:
        name:        Take-off name shown in the list.
        kind:        'area' | 'linear' | 'count' (or a MeasurementKind).
        wbs_element: Cost breakdown element the quantity feeds (optional).
        drawing:     Sheet the take-off is measured on (optional).
    """
    name: str
    kind: object
    wbs_element: str = ''
    drawing: str = ''


@dataclass
class AttachMeasurementCommand:
    """Command for the AttachMeasurement use case.

    Names the pending shape held by the capture engine and attaches it to a
    take-off.

    Attributes:
        takeoff_id: Take-off receiving the measurement.
        label:      Operator-supplied measurement name.
    """
    takeoff_id: str
    label: str


@dataclass
class DeleteMeasurementCommand:
    """Command for the DeleteMeasurement use case.

    Attributes:
        measurement_id: Namespaced id ("<takeoff_id>:<hex>").
    """
    measurement_id: str


@dataclass
class DeleteTakeoffCommand:
    """Command for the DeleteTakeoff use case.

    Removes the take-off, all of its measurements and their shapes.

    Attributes:
        takeoff_id: Take-off to delete.
    """
    takeoff_id: str


@dataclass
class ClearMeasurementsCommand:
    """Command for the ClearMeasurements use case.

    Attributes:
        takeoff_ids: Restrict clearing to these take-offs. None clears every
                     unlocked take-off.
    """
    takeoff_ids: Optional[List[str]] = None


@dataclass
class SaveTakeoffCommand:
    """Command for the SaveTakeoff use case.

    Attributes:
        takeoff_ids: Take-offs to persist. An empty list saves all of them.
    """
    takeoff_ids: List[str] = field(default_factory=list)
