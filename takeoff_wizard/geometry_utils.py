# -*- coding: utf-8 -*-
"""
Geometry Utilities Module
Pure helper functions that turn a traced point sequence into a real-world
quantity (area, length or count) for a given pixel-per-unit scale.

No Qt dependency. All values are rounded to 2 decimal places.
"""

import math

QUANTITY_DECIMALS = 2

# Minimum number of captured points before a trace can be finalized.
MIN_POINTS = {
    'area': 3,
    'linear': 2,
    'count': 1,
}

# Float noise left by the shoelace sum on collinear points is below this
# fraction of the squared bounding-box extent.
AREA_TOLERANCE = 1e-9
LENGTH_TOLERANCE_PX = 1e-9


def validate_scale(value):
    """Validate an operator-entered scale (pixels per real-world unit).

    Args:
        value: int, float or numeric str

    Returns:
        float: the validated scale

    Raises:
        ValueError: if the value is not numeric, not finite, or <= 0.
    """
    if isinstance(value, bool):
        raise ValueError("Scale must be a number of pixels per unit.")
    try:
        scale = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValueError(
            f"Scale '{value}' is not a number. Enter the pixels per unit "
            f"measured on the drawing."
        )
    if math.isnan(scale) or math.isinf(scale):
        raise ValueError("Scale must be a finite number.")
    if scale <= 0:
        raise ValueError("Scale must be greater than zero.")
    return scale


def polygon_area_px(points):
    """Planar area of a polygon in square pixels (shoelace formula).

    The ring is closed implicitly by connecting the last point back to the
    first. Traversal direction does not matter.

    Args:
        points: sequence of (x, y) tuples

    Returns:
        float: area in px², 0.0 for fewer than 3 points
    """
    if len(points) < 3:
        return 0.0
    twice_area = 0.0
    for i, (x1, y1) in enumerate(points):
        x2, y2 = points[(i + 1) % len(points)]
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def polyline_length_px(points):
    """Cumulative Euclidean length of an open polyline, in pixels."""
    length = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        length += math.hypot(x2 - x1, y2 - y1)
    return length


def area_to_units(points, scale):
    """Convert a traced polygon to real-world square units.

    Args:
        points: sequence of (x, y) tuples
        scale:  float — pixels per unit

    Returns:
        float: area in units², rounded to 2 dp
    """
    scale = validate_scale(scale)
    return round(polygon_area_px(points) / (scale * scale), QUANTITY_DECIMALS)


def length_to_units(points, scale):
    """Convert a traced polyline to real-world units (rounded to 2 dp)."""
    scale = validate_scale(scale)
    return round(polyline_length_px(points) / scale, QUANTITY_DECIMALS)


def count_value():
    """Every count click is exactly one unit."""
    return 1


def is_degenerate(kind, points):
    """Return True when a trace cannot produce a meaningful quantity.

    Args:
        kind:   str — 'area', 'linear' or 'count'
        points: sequence of (x, y) tuples

    A trace is degenerate when it has fewer points than the kind minimum,
    when a polygon has zero area (collinear points), or when a polyline
    has zero length. Both checks allow for floating-point noise in scene
    coordinates.
    """
    if len(points) < MIN_POINTS[kind]:
        return True
    if kind == 'area':
        extent = _extent(points)
        return polygon_area_px(points) <= AREA_TOLERANCE * extent * extent
    if kind == 'linear':
        return polyline_length_px(points) <= LENGTH_TOLERANCE_PX
    return False


def _extent(points):
    """Largest side of the bounding box of a point sequence."""
    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    return max(max(xs) - min(xs), max(ys) - min(ys))


def compute_value(kind, points, scale):
    """Dispatch to the converter for a measurement kind.

    Args:
        kind:   str — 'area', 'linear' or 'count'
        points: sequence of (x, y) tuples
        scale:  float — pixels per unit

    Returns:
        float: quantity in the kind's unit

    Raises:
        ValueError: unknown kind or invalid scale.
    """
    if kind == 'area':
        return area_to_units(points, scale)
    if kind == 'linear':
        return length_to_units(points, scale)
    if kind == 'count':
        validate_scale(scale)
        return float(count_value())
    raise ValueError(f"Unknown measurement kind: {kind!r}")


def format_quantity(kind, total):
    """Format a running total for display ('12.50' or '3' for counts)."""
    if kind == 'count':
        return str(int(round(total)))
    return f"{total:.{QUANTITY_DECIMALS}f}"
