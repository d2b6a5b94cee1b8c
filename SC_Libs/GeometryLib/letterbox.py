"""
Letterbox Projection.

Maps pointer positions inside a display container to positions on image
content that is aspect-fit (never cropped) and centered in that container.

The canonical placement coordinate space is percent of the rendered content,
origin top-left of the image, so a placement survives container resizes.

Classes:
    Point: (x, y) in container pixels
    Size: (width, height)
    PercentPoint: (x, y) in percent of image content, each in [0, 100]
    LetterboxRect: Offset and rendered size of the content in its container

Functions:
    compute_letterbox: Fit content into a container
    project_point: Pointer to percent coordinates, or None outside the content
    pointer_to_content_pixels: Pointer to native content pixel coordinates
    scale_brush_size: On-screen brush width to content pixels
"""

from typing import NamedTuple, Optional

from SC_Libs.errors import InputShapeError


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class PercentPoint(NamedTuple):
    x: float
    y: float


class LetterboxRect(NamedTuple):
    """Where content is drawn inside its container."""
    offset_x: float
    offset_y: float
    width: float
    height: float

    def contains(self, local_x: float, local_y: float) -> bool:
        """True if a content-local point lies within the rendered rect (edges included)."""
        return 0 <= local_x <= self.width and 0 <= local_y <= self.height


def _validate_size(size, label: str) -> Size:
    width, height = size
    if width <= 0 or height <= 0:
        raise InputShapeError(f"{label} size must be positive, got {width}x{height}")
    return Size(float(width), float(height))


def compute_letterbox(container_size, content_size) -> LetterboxRect:
    """
    Aspect-fit content into a container.

    Content wider (relative to its height) than the container spans the full
    container width; otherwise it spans the full height. Equal aspect ratios
    take the full-width branch. The spare margin is split evenly.

    Args:
        container_size: (width, height) of the display area
        content_size: Native (width, height) of the image

    Raises:
        InputShapeError: If either size is not positive
    """
    container = _validate_size(container_size, "Container")
    content = _validate_size(content_size, "Content")

    # Compare Wi/Hi against Wc/Hc cross-multiplied so ties are exact.
    if content.width * container.height >= container.width * content.height:
        width = container.width
        height = container.width * content.height / content.width
    else:
        height = container.height
        width = container.height * content.width / content.height

    return LetterboxRect(
        offset_x=(container.width - width) / 2.0,
        offset_y=(container.height - height) / 2.0,
        width=width,
        height=height,
    )


def project_point(pointer, container_size, content_size) -> Optional[PercentPoint]:
    """
    Project a container-relative pointer onto the letterboxed content.

    Returns:
        PercentPoint with both coordinates in [0, 100], or None when the
        pointer falls in the letterbox margin or outside the container
    """
    rect = compute_letterbox(container_size, content_size)
    local_x = pointer[0] - rect.offset_x
    local_y = pointer[1] - rect.offset_y

    if not rect.contains(local_x, local_y):
        return None

    x = min(100.0, max(0.0, local_x / rect.width * 100.0))
    y = min(100.0, max(0.0, local_y / rect.height * 100.0))
    return PercentPoint(x, y)


def pointer_to_content_pixels(pointer, container_size, content_size) -> Point:
    """
    Map a container-relative pointer to native content pixel coordinates.

    The result is not clamped; strokes that leave the image are clipped by
    the paint layer instead.
    """
    rect = compute_letterbox(container_size, content_size)
    scale_x = content_size[0] / rect.width
    scale_y = content_size[1] / rect.height
    return Point(
        (pointer[0] - rect.offset_x) * scale_x,
        (pointer[1] - rect.offset_y) * scale_y,
    )


def scale_brush_size(brush_size: float, container_size, content_size) -> float:
    """Convert an on-screen brush width to content pixels."""
    rect = compute_letterbox(container_size, content_size)
    return brush_size * content_size[0] / rect.width
