# -*- coding: utf-8 -*-
"""
Tool and CaptureState enums used by the CaptureEngine.
"""

from enum import Enum

from ..domain.models.measurement_kind import MeasurementKind


class Tool(Enum):
    """Tools the operator can pick on the toolbar.

    Values match the MeasurementKind values for the measuring tools.
    """
    POINTER = "pointer"
    AREA    = "area"
    LINEAR  = "linear"
    COUNT   = "count"

    @property
    def kind(self):
        """MeasurementKind produced by this tool, or None for the pointer."""
        if self is Tool.POINTER:
            return None
        return MeasurementKind(self.value)

    @property
    def is_tracing(self) -> bool:
        """True for tools that accumulate points between press and release."""
        return self in (Tool.AREA, Tool.LINEAR)


class CaptureState(Enum):
    """States of the capture machine.

    IDLE                 — no capture in progress (a non-pointer tool may be armed)
    CAPTURING            — points accumulating between pointer-down and pointer-up
    PENDING_CONFIRMATION — a shape is complete and waits for a label
    """
    IDLE                 = "idle"
    CAPTURING            = "capturing"
    PENDING_CONFIRMATION = "pending_confirmation"
