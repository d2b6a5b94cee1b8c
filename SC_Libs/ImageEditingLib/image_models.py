"""
Image editing data models for Scene Canvas.

This module defines core data structures used throughout the image editing system.

Classes:
    PixelBuffer: Immutable RGBA pixel grid shared between pipeline stages
    Edits: Slider values for one editing pass (brightness, contrast, ...)

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Tuple

import numpy as np
from PIL import Image

from SC_Libs.constants import (
    EFFECT_EDIT_MAX,
    EFFECT_EDIT_MIN,
    FIELD_BRIGHTNESS,
    FIELD_CONTRAST,
    FIELD_SATURATION,
    FIELD_SHARPEN,
    FIELD_VIGNETTE,
    TONAL_EDIT_MAX,
    TONAL_EDIT_MIN,
)
from SC_Libs.errors import PipelineError

RgbaColor = Tuple[int, int, int, int]


class PixelBuffer:
    """
    Row-major RGBA pixel grid.

    The samples live in a read-only ``uint8`` numpy array of shape
    ``(height, width, 4)``. Transforms never write into a buffer; they build
    a new one, so a buffer can be handed between stages and kept in history
    without copying.

    Example:
        >>> buffer = PixelBuffer.blank(4, 2, (255, 0, 0, 255))
        >>> buffer.size
        (4, 2)
        >>> len(buffer.to_bytes())
        32
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: Any):
        array = np.asarray(pixels)
        if array.dtype != np.uint8:
            raise PipelineError(f"PixelBuffer requires uint8 samples, got {array.dtype}")
        if array.ndim != 3 or array.shape[2] != 4:
            raise PipelineError(f"PixelBuffer requires an (H, W, 4) array, got shape {array.shape}")
        if array.shape[0] < 1 or array.shape[1] < 1:
            raise PipelineError(f"PixelBuffer must be at least 1x1, got {array.shape[1]}x{array.shape[0]}")

        if array.flags.writeable or not array.flags.c_contiguous:
            array = np.array(array, dtype=np.uint8, order="C", copy=True)
            array.setflags(write=False)
        self._pixels = array

    @classmethod
    def blank(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        if width < 1 or height < 1:
            raise PipelineError(f"PixelBuffer must be at least 1x1, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """
        Build a buffer from raw RGBA bytes.

        Raises:
            PipelineError: If len(data) != width * height * 4
        """
        expected = width * height * 4
        if len(data) != expected:
            raise PipelineError(
                f"Expected {expected} bytes for a {width}x{height} RGBA buffer, got {len(data)}"
            )
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape((height, width, 4))
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """Build a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise PipelineError(f"Expected PIL Image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.asarray(image, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), the same order PIL uses."""
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) view of the samples."""
        return self._pixels

    def to_bytes(self) -> bytes:
        return self._pixels.tobytes()

    def to_image(self) -> Any:
        """Return a new PIL Image in RGBA mode."""
        return Image.fromarray(np.array(self._pixels))

    def __len__(self) -> int:
        return int(self._pixels.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and bool(np.array_equal(self._pixels, other._pixels))

    def __hash__(self) -> int:
        return hash((self._pixels.shape, self._pixels.tobytes()))

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


_TONAL_FIELDS = (FIELD_BRIGHTNESS, FIELD_CONTRAST, FIELD_SATURATION)
_EFFECT_FIELDS = (FIELD_SHARPEN, FIELD_VIGNETTE)


@dataclass(frozen=True)
class Edits:
    """Slider values for one editing pass.

    Attributes:
        brightness: Percent, 100 = unchanged (0-200)
        contrast: Percent, 100 = unchanged (0-200)
        saturation: Percent, 100 = unchanged (0-200)
        sharpen: Percent, 0 = off (0-100)
        vignette: Percent, 0 = off (0-100)
    """
    brightness: int = 100
    contrast: int = 100
    saturation: int = 100
    sharpen: int = 0
    vignette: int = 0

    def __post_init__(self):
        """Validate slider ranges."""
        for name in _TONAL_FIELDS:
            value = getattr(self, name)
            if not (TONAL_EDIT_MIN <= value <= TONAL_EDIT_MAX):
                raise ValueError(f"{name} must be {TONAL_EDIT_MIN}-{TONAL_EDIT_MAX}, got {value}")
        for name in _EFFECT_FIELDS:
            value = getattr(self, name)
            if not (EFFECT_EDIT_MIN <= value <= EFFECT_EDIT_MAX):
                raise ValueError(f"{name} must be {EFFECT_EDIT_MIN}-{EFFECT_EDIT_MAX}, got {value}")

    @property
    def has_edits(self) -> bool:
        """True when any field differs from the reset value."""
        return self != RESET_EDITS

    def with_value(self, field_name: str, value: int) -> "Edits":
        """Return a new record with one slider changed."""
        if field_name not in self.__dataclass_fields__:
            raise KeyError(f"Unknown edit field: {field_name}")
        return replace(self, **{field_name: int(value)})

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edits":
        """Create from dictionary."""
        filtered = {k: int(v) for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


RESET_EDITS = Edits()


def to_byte_samples(values: np.ndarray) -> np.ndarray:
    """Round half-to-even and clamp float samples into uint8, like a clamped byte canvas."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)
