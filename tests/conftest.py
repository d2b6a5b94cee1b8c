"""
Pytest configuration and shared fixtures for Scene Canvas tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from SC_Libs.ImageEditingLib.image_models import PixelBuffer


def make_gradient(width: int, height: int) -> PixelBuffer:
    """Opaque buffer with a horizontal red ramp, vertical green ramp and constant blue."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)[np.newaxis, :]
    pixels[:, :, 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]
    pixels[:, :, 2] = 96
    pixels[:, :, 3] = 255
    return PixelBuffer(pixels)


@pytest.fixture
def gradient_buffer():
    """
    Provide a 64x48 opaque gradient buffer.

    Returns:
        PixelBuffer with varied colors in every region
    """
    return make_gradient(64, 48)


@pytest.fixture
def transparent_layer():
    """Provide an empty 32x24 stroke layer."""
    return PixelBuffer.blank(32, 24)


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
