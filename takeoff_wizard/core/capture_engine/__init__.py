# -*- coding: utf-8 -*-
"""
Capture Engine package — the measurement capture state machine.

Public API:
    CaptureEngine  — explicit state machine fed by pointer events
    PendingShape   — a finalized trace awaiting an operator label
    Tool           — enum for the active tool
    CaptureState   — enum for the machine state
"""

from .engine import CaptureEngine, PendingShape
from .operations import Tool, CaptureState

__all__ = ["CaptureEngine", "PendingShape", "Tool", "CaptureState"]
