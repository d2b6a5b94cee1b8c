"""
Edit Pipeline.

Runs an Edits record through the fixed stage order

    Sharpen -> Color Adjust -> Vignette

Sharpening sees raw samples so contrast changes do not skew the kernel, and
the vignette is applied last so it is never sharpened or re-tinted.

Previews run the same pipeline on a copy whose longest side is capped
(PREVIEW_MAX_DIM); commits run it on the full-resolution buffer.
"""

import logging
from typing import Optional, Tuple

from PIL import Image

from SC_Libs.constants import EDIT_PIPELINE_ORDER, PREVIEW_MAX_DIM
from SC_Libs.errors import PipelineError
from SC_Libs.ImageEditingLib.filter_registry import FilterRegistry, get_default_registry
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer

logger = logging.getLogger(__name__)


def run_edit_pipeline(
    buffer: PixelBuffer,
    edits: Edits,
    registry: Optional[FilterRegistry] = None,
) -> PixelBuffer:
    """
    Apply every edit stage in order.

    Args:
        buffer: Source pixels (left untouched)
        edits: Slider values for this pass
        registry: Filter registry (default: the global registry)

    Returns:
        Resulting PixelBuffer. When ``edits`` has no effect this is ``buffer``.

    Raises:
        PipelineError: If the input is not a PixelBuffer or a stage fails
    """
    if not isinstance(buffer, PixelBuffer):
        raise PipelineError(f"Expected PixelBuffer, got {type(buffer)}")

    registry = registry or get_default_registry()
    result = buffer

    for stage in EDIT_PIPELINE_ORDER:
        try:
            result = registry.execute(stage, result, edits)
        except PipelineError:
            raise
        except Exception as e:
            raise PipelineError(f"Error executing filter stage {stage}: {str(e)}") from e

    return result


def preview_size(width: int, height: int, max_dim: int = PREVIEW_MAX_DIM) -> Tuple[int, int]:
    """
    Size of the preview copy for an image.

    Images within ``max_dim`` on both sides keep their size; larger ones are
    scaled so the longest side equals ``max_dim``. Fractional sizes truncate,
    with a floor of one pixel.
    """
    if width <= max_dim and height <= max_dim:
        return width, height

    if width > height:
        return max_dim, max(1, int(max_dim / width * height))
    return max(1, int(max_dim / height * width)), max_dim


def downscale_for_preview(buffer: PixelBuffer, max_dim: int = PREVIEW_MAX_DIM) -> PixelBuffer:
    """Return a down-scaled copy for interactive previews (Lanczos)."""
    target = preview_size(buffer.width, buffer.height, max_dim)
    if target == buffer.size:
        return buffer

    logger.debug(f"Downscaling {buffer.width}x{buffer.height} to {target[0]}x{target[1]} for preview")
    resized = buffer.to_image().resize(target, Image.Resampling.LANCZOS)
    return PixelBuffer.from_image(resized)


def render_preview(
    source_preview: PixelBuffer,
    edits: Edits,
    registry: Optional[FilterRegistry] = None,
) -> PixelBuffer:
    """Run the pipeline on an already down-scaled preview source."""
    return run_edit_pipeline(source_preview, edits, registry)


def render_full_resolution(
    buffer: PixelBuffer,
    edits: Edits,
    registry: Optional[FilterRegistry] = None,
) -> PixelBuffer:
    """Run the pipeline on the original-resolution buffer for a commit."""
    logger.debug(f"Rendering edits {edits.to_dict()} at {buffer.width}x{buffer.height}")
    return run_edit_pipeline(buffer, edits, registry)
