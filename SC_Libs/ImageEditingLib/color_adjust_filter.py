"""
Brightness / Contrast / Saturation Filter.

Percentages follow CSS filter semantics, with 100 meaning "unchanged":

- brightness: linear scale of every color channel
- contrast: scale around mid-gray (127.5)
- saturation: blend toward luma (Rec. 709 weights) via the saturate matrix

The three adjustments run in that order and each clamps to 0-255 before the
next one, as a chained filter would. Alpha is passed through.
"""

from typing import Tuple

import numpy as np

from SC_Libs.constants import LUMA_BLUE, LUMA_GREEN, LUMA_RED
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer, to_byte_samples

MID_GRAY = 127.5


def saturation_matrix(saturation: float) -> np.ndarray:
    """
    Build the 3x3 saturate matrix for a saturation percentage.

    Each output row is ``(1 - s) * luma + s * identity_row``.

    Args:
        saturation: Percent, 100 = identity, 0 = grayscale

    Returns:
        (3, 3) float64 matrix applied as ``rgb @ matrix.T``
    """
    s = float(saturation) / 100.0
    luma = np.array([LUMA_RED, LUMA_GREEN, LUMA_BLUE], dtype=np.float64)
    return (1.0 - s) * np.tile(luma, (3, 1)) + s * np.eye(3, dtype=np.float64)


def adjust_rgb(
    rgb: np.ndarray,
    brightness: float = 100,
    contrast: float = 100,
    saturation: float = 100,
) -> np.ndarray:
    """Apply the three adjustments to a float (..., 3) array in 0-255 space."""
    if brightness != 100:
        rgb = np.clip(rgb * (float(brightness) / 100.0), 0.0, 255.0)

    if contrast != 100:
        rgb = np.clip((rgb - MID_GRAY) * (float(contrast) / 100.0) + MID_GRAY, 0.0, 255.0)

    if saturation != 100:
        rgb = np.clip(rgb @ saturation_matrix(saturation).T, 0.0, 255.0)

    return rgb


def adjust_color(
    color: Tuple[int, int, int],
    brightness: float = 100,
    contrast: float = 100,
    saturation: float = 100,
) -> Tuple[int, int, int]:
    """Adjust a single RGB triple; handy for previews of swatches and tests."""
    rgb = adjust_rgb(np.array(color, dtype=np.float64), brightness, contrast, saturation)
    r, g, b = (int(v) for v in to_byte_samples(rgb))
    return r, g, b


def apply_color_adjust(
    buffer: PixelBuffer,
    brightness: float = 100,
    contrast: float = 100,
    saturation: float = 100,
) -> PixelBuffer:
    """
    Apply brightness, contrast and saturation to a buffer.

    Returns the buffer itself when all three values are 100.

    Raises:
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    if brightness == 100 and contrast == 100 and saturation == 100:
        return buffer

    rgb = adjust_rgb(
        buffer.pixels[:, :, :3].astype(np.float64),
        brightness,
        contrast,
        saturation,
    )

    result = np.empty(buffer.pixels.shape, dtype=np.uint8)
    result[:, :, :3] = to_byte_samples(rgb)
    result[:, :, 3] = buffer.pixels[:, :, 3]
    return PixelBuffer(result)


def execute_color_adjust_stage(buffer: PixelBuffer, edits: Edits) -> PixelBuffer:
    """Pipeline stage executor for the color adjustment filter."""
    return apply_color_adjust(buffer, edits.brightness, edits.contrast, edits.saturation)
