"""
Freehand Stroke Mask and Binary Mask Encoder.

A StrokeMask is the in-progress paint layer a user drags a brush over, either
on the scene ("remove object") or on a product ("manual background removal").
Strokes are drawn as round-capped segments in translucent red and composited
onto the layer, so alpha accumulates where segments overlap.

encode_binary_mask() turns any stroke layer into the mask the external
service expects: painted pixels become opaque white, everything else opaque
black.

Example:
    >>> mask = StrokeMask(200, 100, brush_size=20)
    >>> mask.begin_stroke((10, 50))
    >>> mask.extend_stroke((120, 50))
    >>> mask.end_stroke()
    >>> binary = mask.encode()
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from SC_Libs.constants import (
    DEFAULT_BRUSH_SIZE,
    MASK_SELECTED,
    MASK_UNSELECTED,
    STROKE_COLOR,
)
from SC_Libs.errors import EmptyMaskError
from SC_Libs.ImageEditingLib.image_models import PixelBuffer, RgbaColor

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

EMPTY_MASK_MESSAGE = "Paint over the area you want to select before confirming."


def painted_pixels(stroke_layer: PixelBuffer) -> np.ndarray:
    """
    Boolean (H, W) map of painted pixels.

    A pixel is painted when its alpha is above zero. Opaque pure black is the
    "unselected" value of an encoded mask and is never counted as paint, so
    encoding an already-binary mask gives the same mask back.
    """
    pixels = stroke_layer.pixels
    alpha = pixels[:, :, 3]
    mask_black = (alpha == 255) & np.all(pixels[:, :, :3] == 0, axis=2)
    return (alpha > 0) & ~mask_black


def has_painted_pixels(stroke_layer: PixelBuffer) -> bool:
    return bool(painted_pixels(stroke_layer).any())


def encode_binary_mask(stroke_layer: PixelBuffer) -> PixelBuffer:
    """
    Encode a stroke layer as a black/white mask of the same size.

    Args:
        stroke_layer: RGBA layer with accumulated stroke alpha

    Returns:
        New PixelBuffer; painted pixels (255, 255, 255, 255), others (0, 0, 0, 255)

    Raises:
        TypeError: If stroke_layer is not a PixelBuffer
        EmptyMaskError: If nothing has been painted
    """
    if not isinstance(stroke_layer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(stroke_layer)}")

    selected = painted_pixels(stroke_layer)
    if not selected.any():
        raise EmptyMaskError(EMPTY_MASK_MESSAGE)

    mask = np.empty(stroke_layer.pixels.shape, dtype=np.uint8)
    mask[:, :] = MASK_UNSELECTED
    mask[selected] = MASK_SELECTED
    return PixelBuffer(mask)


def resize_mask(mask: PixelBuffer, size: Tuple[int, int]) -> PixelBuffer:
    """
    Resize a binary mask with nearest-neighbour sampling so it stays binary.

    Args:
        mask: Encoded black/white mask
        size: Target (width, height)
    """
    if mask.size == tuple(size):
        return mask
    resized = mask.to_image().resize(tuple(size), Image.Resampling.NEAREST)
    return PixelBuffer.from_image(resized)


class StrokeMask:
    """Paint layer accumulating freehand brush strokes."""

    def __init__(
        self,
        width: int,
        height: int,
        brush_size: float = DEFAULT_BRUSH_SIZE,
        color: RgbaColor = STROKE_COLOR,
    ):
        if width < 1 or height < 1:
            raise ValueError(f"StrokeMask must be at least 1x1, got {width}x{height}")
        if tuple(color) == MASK_UNSELECTED:
            # Opaque black reads as unselected when encoded.
            raise ValueError(f"Stroke color {tuple(color)} cannot be told apart from unpainted pixels")
        self._layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._color = tuple(color)
        self._last_point: Optional[Point] = None
        self.brush_size = brush_size

    @property
    def size(self) -> Tuple[int, int]:
        return self._layer.size

    @property
    def brush_size(self) -> float:
        return self._brush_size

    @brush_size.setter
    def brush_size(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"brush_size must be > 0, got {value}")
        self._brush_size = float(value)

    @property
    def is_drawing(self) -> bool:
        return self._last_point is not None

    def begin_stroke(self, point: Point) -> None:
        """Start a stroke; nothing is painted until the pointer moves."""
        self._last_point = (float(point[0]), float(point[1]))

    def extend_stroke(self, point: Point) -> None:
        """Paint a segment from the previous point to ``point``."""
        if self._last_point is None:
            return
        current = (float(point[0]), float(point[1]))
        self._paint_segment(self._last_point, current)
        self._last_point = current

    def end_stroke(self) -> None:
        self._last_point = None

    def clear(self) -> None:
        """Erase all strokes and abandon any stroke in progress."""
        self._layer = Image.new("RGBA", self._layer.size, (0, 0, 0, 0))
        self._last_point = None

    def is_empty(self) -> bool:
        return self._layer.getchannel("A").getbbox() is None

    def to_buffer(self) -> PixelBuffer:
        return PixelBuffer.from_image(self._layer)

    def encode(self) -> PixelBuffer:
        """Encode the painted strokes; raises EmptyMaskError when nothing is painted."""
        return encode_binary_mask(self.to_buffer())

    def _paint_segment(self, start: Point, end: Point) -> None:
        radius = self._brush_size / 2.0
        width, height = self._layer.size

        left = int(max(0, np.floor(min(start[0], end[0]) - radius)))
        top = int(max(0, np.floor(min(start[1], end[1]) - radius)))
        right = int(min(width, np.ceil(max(start[0], end[0]) + radius) + 1))
        bottom = int(min(height, np.ceil(max(start[1], end[1]) + radius) + 1))
        if right <= left or bottom <= top:
            return

        # Draw into a patch covering the segment's bounding box, then composite
        # it so overlapping strokes accumulate alpha.
        patch = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        draw = ImageDraw.Draw(patch)
        local_start = (start[0] - left, start[1] - top)
        local_end = (end[0] - left, end[1] - top)

        draw.line([local_start, local_end], fill=self._color, width=max(1, int(round(self._brush_size))))
        for cx, cy in (local_start, local_end):
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=self._color)

        self._layer.alpha_composite(patch, dest=(left, top))
