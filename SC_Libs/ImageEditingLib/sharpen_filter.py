"""
Sharpen Filter.

A 3x3 unsharp-style convolution blended with the source by amount:

    out = original * (1 - s) + convolved * s,   s = amount / 100

Only R, G and B are convolved; alpha is passed through. Borders are
edge-replicated (scipy ``mode="nearest"``), never wrapped or zero padded.

Example:
    >>> buffer = PixelBuffer.from_image(Image.open("scene.jpg"))
    >>> sharpened = apply_sharpen(buffer, amount=40)
"""

import numpy as np
from scipy import ndimage

from SC_Libs.constants import SHARPEN_KERNEL
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer, to_byte_samples

_KERNEL = np.array(SHARPEN_KERNEL, dtype=np.float64)


def apply_sharpen(buffer: PixelBuffer, amount: float) -> PixelBuffer:
    """
    Sharpen a buffer.

    Args:
        buffer: Source pixels
        amount: Sharpen percentage (0-100). Values <= 0 return the buffer
                unchanged; values above 100 are treated as 100.

    Returns:
        New PixelBuffer with sharpened color channels

    Raises:
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    if amount <= 0:
        return buffer

    strength = min(float(amount), 100.0) / 100.0
    source = buffer.pixels.astype(np.float64)
    result = np.empty(buffer.pixels.shape, dtype=np.uint8)

    for channel_idx in range(3):
        channel = source[:, :, channel_idx]
        convolved = ndimage.convolve(channel, _KERNEL, mode="nearest")
        result[:, :, channel_idx] = to_byte_samples(
            channel * (1.0 - strength) + convolved * strength
        )

    result[:, :, 3] = buffer.pixels[:, :, 3]
    return PixelBuffer(result)


def execute_sharpen_stage(buffer: PixelBuffer, edits: Edits) -> PixelBuffer:
    """Pipeline stage executor for the sharpen filter."""
    return apply_sharpen(buffer, edits.sharpen)
