# -*- coding: utf-8 -*-
"""
Application layer — use cases for the Take-off Wizard.

Each use case in this layer:
  - Receives a Command dataclass (input DTO)
  - Validates business rules
  - Orchestrates domain objects, the capture engine, the ledger and the overlay
  - Returns a plain dict result
  - Raises ValueError / KeyError / RuntimeError on failure (NO QMessageBox)

The UI (TakeoffMainForm) catches exceptions and shows QMessageBox.

Layer position:
    UI (dialog + canvas view)
      ↓ scene coordinates + primitive types
    TakeoffExecutor (overlay controller — owns engine/ledger, creates commands)
      ↓ Command dataclasses
    Use Cases (this package)
      ↓ domain objects + CaptureEngine + TakeoffLedger
    Infrastructure (TakeoffRepository, TakeoffStore, BackgroundPersistence)
"""

from .persistence import BackgroundPersistence
from .use_cases import (
    CreateTakeoffCommand,
    AttachMeasurementCommand,
    DeleteMeasurementCommand,
    DeleteTakeoffCommand,
    ClearMeasurementsCommand,
    SaveTakeoffCommand,
    CreateTakeoff,
    AttachMeasurement,
    DeleteMeasurement,
    DeleteTakeoff,
    ClearMeasurements,
    SaveTakeoff,
    LoadTakeoffs,
)

__all__ = [
    'BackgroundPersistence',
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
