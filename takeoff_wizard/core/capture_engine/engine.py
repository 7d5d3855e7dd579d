# -*- coding: utf-8 -*-
"""
CaptureEngine — explicit state machine for tracing measurements.

State model:
    IDLE ──pointer-down (area/linear)──▶ CAPTURING ──pointer-up──▶ PENDING_CONFIRMATION
    IDLE ──pointer-down (count)────────────────────────────────▶ PENDING_CONFIRMATION
    PENDING_CONFIRMATION ──confirm(label) / cancel()──▶ IDLE

  - Switching tools while CAPTURING or PENDING_CONFIRMATION discards the shape.
  - Traces below the kind minimum (or with zero area / length) reset to IDLE
    without producing anything.
  - With no document loaded, pointer events are ignored.

The engine holds no Qt objects. The overlay controller owns one instance and
forwards pointer events to it; after each call it reads `state`, `points`
and `pending` to redraw the transient trace.

Usage:
    engine = CaptureEngine(scale=100)
    engine.select_tool(Tool.AREA)
    engine.pointer_down(0, 0)
    engine.pointer_move(100, 0)
    engine.pointer_move(100, 100)
    shape = engine.pointer_up(0, 100)      # PendingShape(value=0.5, ...)
    shape = engine.confirm("Slab")         # back to IDLE
"""

from dataclasses import dataclass
from typing import Optional

from ...geometry_utils import compute_value, is_degenerate, validate_scale
from ..domain.models.measurement import Geometry
from .operations import Tool, CaptureState


@dataclass(frozen=True)
class PendingShape:
    """A finalized trace waiting for the operator to name it.

    Attributes:
        geometry: Frozen points of the shape.
        value:    Quantity computed at finalize time (2 dp).
        scale:    Scale the value was computed with.
    """

    geometry: Geometry
    value: float
    scale: float

    @property
    def kind(self):
        return self.geometry.kind

    @property
    def unit(self) -> str:
        return self.geometry.kind.unit


class CaptureEngine:
    """Tracks the active tool, the in-progress points and the pending shape."""

    DEFAULT_SCALE = 100.0

    def __init__(self, scale=DEFAULT_SCALE, document_available=True):
        """
        Args:
            scale:              float — initial pixels per unit
            document_available: bool — whether a page is loaded under the overlay

        Raises:
            ValueError: invalid initial scale.
        """
        self._scale = validate_scale(scale)
        self._tool = Tool.POINTER
        self._state = CaptureState.IDLE
        self._points = []
        self._pending = None
        self._document_available = bool(document_available)

    # ------------------------------------------------------------------ #
    #  Read-only state
    # ------------------------------------------------------------------ #

    @property
    def tool(self) -> Tool:
        return self._tool

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def points(self) -> tuple:
        """Points of the trace in progress (empty unless CAPTURING)."""
        return tuple(self._points)

    @property
    def pending(self) -> Optional[PendingShape]:
        return self._pending

    @property
    def document_available(self) -> bool:
        return self._document_available

    # ------------------------------------------------------------------ #
    #  Configuration
    # ------------------------------------------------------------------ #

    def set_scale(self, value) -> float:
        """Change the scale used for shapes finalized from now on.

        A shape already pending keeps the scale it was computed with.

        Raises:
            ValueError: value is not a positive finite number. The previous
                        scale stays active.
        """
        self._scale = validate_scale(value)
        return self._scale

    def set_document_available(self, available) -> bool:
        """Enable or disable tracing depending on whether a page is loaded.

        Returns:
            bool: True if an in-progress trace was aborted.
        """
        self._document_available = bool(available)
        if not self._document_available and self._state is CaptureState.CAPTURING:
            self._reset()
            return True
        return False

    def select_tool(self, tool) -> bool:
        """Activate a tool, discarding any shape in progress.

        Args:
            tool: Tool or its string value

        Returns:
            bool: True if a trace or pending shape was discarded.
        """
        tool = Tool(tool)
        discarded = self._state is not CaptureState.IDLE
        self._tool = tool
        self._reset()
        return discarded

    # ------------------------------------------------------------------ #
    #  Pointer events
    # ------------------------------------------------------------------ #

    def pointer_down(self, x, y) -> bool:
        """Start a trace (area/linear) or drop a count marker.

        Returns:
            bool: True if the event was consumed.
        """
        if self._tool is Tool.POINTER or not self._document_available:
            return False
        if self._state is CaptureState.PENDING_CONFIRMATION:
            return False

        point = (float(x), float(y))
        if self._tool is Tool.COUNT:
            self._finalize([point])
            return True

        # A down while already capturing (release lost outside the surface)
        # restarts the trace.
        self._points = [point]
        self._state = CaptureState.CAPTURING
        return True

    def pointer_move(self, x, y) -> bool:
        """Append a point to the trace in progress."""
        if self._state is not CaptureState.CAPTURING:
            return False
        self._append((float(x), float(y)))
        return True

    def pointer_up(self, x=None, y=None) -> Optional[PendingShape]:
        """Finalize the trace in progress.

        Returns:
            PendingShape or None when nothing was captured or the trace was
            degenerate (silently discarded).
        """
        if self._state is not CaptureState.CAPTURING:
            return None
        if x is not None and y is not None:
            self._append((float(x), float(y)))
        points = self._points
        self._points = []
        return self._finalize(points)

    # ------------------------------------------------------------------ #
    #  Confirmation
    # ------------------------------------------------------------------ #

    def confirm(self, label) -> PendingShape:
        """Accept the pending shape under an operator label.

        Returns:
            PendingShape: the accepted shape; the machine is back to IDLE.

        Raises:
            RuntimeError: nothing is pending.
            ValueError:   blank label; the shape stays pending.
        """
        if self._pending is None:
            raise RuntimeError("There is no measurement waiting for a name.")
        if not (label or '').strip():
            raise ValueError("Please enter a measurement name.")
        shape = self._pending
        self._reset()
        return shape

    def cancel(self) -> bool:
        """Discard any trace or pending shape. Returns True if one existed."""
        discarded = self._state is not CaptureState.IDLE
        self._reset()
        return discarded

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    def _append(self, point):
        if not self._points or self._points[-1] != point:
            self._points.append(point)

    def _finalize(self, points):
        kind = self._tool.kind
        if is_degenerate(kind.value, points):
            self._reset()
            return None
        self._pending = PendingShape(
            geometry=Geometry.from_points(kind, points),
            value=compute_value(kind.value, points, self._scale),
            scale=self._scale,
        )
        self._state = CaptureState.PENDING_CONFIRMATION
        return self._pending

    def _reset(self):
        self._points = []
        self._pending = None
        self._state = CaptureState.IDLE
