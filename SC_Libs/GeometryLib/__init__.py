"""
GeometryLib - Screen to image coordinate mapping

Letterbox projection, drag translation and pinch scaling for placing a
product on a scene.
"""

from SC_Libs.GeometryLib.letterbox import (
    LetterboxRect,
    PercentPoint,
    Point,
    Size,
    compute_letterbox,
    pointer_to_content_pixels,
    project_point,
    scale_brush_size,
)
from SC_Libs.GeometryLib.gestures import (
    GestureMode,
    GestureTracker,
    PlacementUpdate,
    clamp_scale,
    drag_position,
    pinch_scale,
    pointer_distance,
)

__all__ = [
    "LetterboxRect",
    "PercentPoint",
    "Point",
    "Size",
    "compute_letterbox",
    "pointer_to_content_pixels",
    "project_point",
    "scale_brush_size",
    "GestureMode",
    "GestureTracker",
    "PlacementUpdate",
    "clamp_scale",
    "drag_position",
    "pinch_scale",
    "pointer_distance",
]
