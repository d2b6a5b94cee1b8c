"""
Vignette Filter.

Darkens the image with a black radial gradient overlay centered on the image:

- transparent inside ``min(W, H) / 4``
- ``0.2 * strength`` opacity halfway between the inner and outer radius
- ``0.7 * strength`` opacity at the outer radius (half the image diagonal)

Opacity is linear between stops, so the falloff is two-segment rather than a
single linear ramp. Pixels are sampled at their centers.
"""

import math

import numpy as np

from SC_Libs.constants import VIGNETTE_STOPS
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer, to_byte_samples


def vignette_radii(width: int, height: int):
    """Return (inner_radius, outer_radius) for an image size."""
    inner = min(width, height) / 4.0
    outer = math.sqrt(width * width + height * height) / 2.0
    return inner, outer


def vignette_opacity_map(width: int, height: int, strength: float) -> np.ndarray:
    """
    Compute overlay opacity for every pixel.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        strength: 0.0-1.0 (vignette amount / 100)

    Returns:
        (height, width) float64 array of opacities in 0.0-0.7
    """
    inner, outer = vignette_radii(width, height)
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    radius = np.hypot(xs + 0.5 - width / 2.0, ys + 0.5 - height / 2.0)

    t = np.clip((radius - inner) / (outer - inner), 0.0, 1.0)
    offsets = [offset for offset, _ in VIGNETTE_STOPS]
    opacities = [factor * strength for _, factor in VIGNETTE_STOPS]
    return np.interp(t, offsets, opacities)


def apply_vignette(buffer: PixelBuffer, amount: float) -> PixelBuffer:
    """
    Composite the vignette gradient over a buffer (source-over, black).

    Args:
        buffer: Source pixels
        amount: Vignette percentage (0-100); <= 0 returns the buffer unchanged

    Returns:
        New PixelBuffer with the overlay applied

    Raises:
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    if amount <= 0:
        return buffer

    strength = min(float(amount), 100.0) / 100.0
    overlay_alpha = vignette_opacity_map(buffer.width, buffer.height, strength)

    source = buffer.pixels.astype(np.float64)
    source_alpha = source[:, :, 3] / 255.0
    out_alpha = overlay_alpha + source_alpha * (1.0 - overlay_alpha)

    # Black contributes nothing to color; only the source term survives.
    weight = np.divide(
        source_alpha * (1.0 - overlay_alpha),
        out_alpha,
        out=np.zeros_like(out_alpha),
        where=out_alpha > 0,
    )

    result = np.empty(buffer.pixels.shape, dtype=np.uint8)
    result[:, :, :3] = to_byte_samples(source[:, :, :3] * weight[:, :, np.newaxis])
    result[:, :, 3] = to_byte_samples(out_alpha * 255.0)
    return PixelBuffer(result)


def execute_vignette_stage(buffer: PixelBuffer, edits: Edits) -> PixelBuffer:
    """Pipeline stage executor for the vignette filter."""
    return apply_vignette(buffer, edits.vignette)
