"""
ImageEditingLib - Pixel pipeline functionality

This module provides pixel buffers, the sharpen / color / vignette edit
pipeline, stroke mask encoding and image import/export for the Scene Canvas
project.
"""

from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer, RESET_EDITS, RgbaColor
from SC_Libs.ImageEditingLib.sharpen_filter import apply_sharpen
from SC_Libs.ImageEditingLib.color_adjust_filter import adjust_color, apply_color_adjust
from SC_Libs.ImageEditingLib.vignette_filter import apply_vignette
from SC_Libs.ImageEditingLib.filter_registry import FilterRegistry, get_default_registry
from SC_Libs.ImageEditingLib.edit_pipeline import (
    downscale_for_preview,
    preview_size,
    render_full_resolution,
    render_preview,
    run_edit_pipeline,
)
from SC_Libs.ImageEditingLib.mask_encoder import (
    StrokeMask,
    encode_binary_mask,
    has_painted_pixels,
    resize_mask,
)
from SC_Libs.ImageEditingLib.image_io import (
    decode_data_url,
    decode_image_bytes,
    encode_data_url,
    encode_png_bytes,
    get_supported_formats,
    is_supported_format,
    load_image_file,
    save_image,
)

__all__ = [
    "Edits",
    "PixelBuffer",
    "RESET_EDITS",
    "RgbaColor",
    "apply_sharpen",
    "adjust_color",
    "apply_color_adjust",
    "apply_vignette",
    "FilterRegistry",
    "get_default_registry",
    "downscale_for_preview",
    "preview_size",
    "render_full_resolution",
    "render_preview",
    "run_edit_pipeline",
    "StrokeMask",
    "encode_binary_mask",
    "has_painted_pixels",
    "resize_mask",
    "decode_data_url",
    "decode_image_bytes",
    "encode_data_url",
    "encode_png_bytes",
    "get_supported_formats",
    "is_supported_format",
    "load_image_file",
    "save_image",
]
