"""
Image Import and Export for Scene Canvas.

Loads user uploads into PixelBuffers and converts buffers to and from the
encodings the external image service speaks (PNG bytes and base64 data URLs).

Only PNG and JPEG uploads are accepted.

Functions:
    get_supported_formats: Sorted list of accepted upload extensions
    is_supported_format: Check a path's extension
    load_image_file: Load an upload from disk into a PixelBuffer
    decode_image_bytes: Decode encoded image bytes into a PixelBuffer
    decode_data_url: Decode a ``data:image/...;base64,`` URL
    encode_png_bytes: Encode a PixelBuffer as PNG
    encode_data_url: Encode a PixelBuffer as a PNG data URL
    save_image: Write a PixelBuffer to disk
    timestamped_name: Build names like ``generated-scene-<ms>.jpeg``
"""

import base64
import binascii
import io
import logging
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from PIL import Image, UnidentifiedImageError

from SC_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_UPLOAD_IMAGES,
    SUPPORTED_UPLOAD_MIME_TYPES,
    UNSUPPORTED_FORMAT_MESSAGE,
)
from SC_Libs.errors import PipelineError, UnsupportedImageError
from SC_Libs.ImageEditingLib.image_models import PixelBuffer

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)


def get_supported_formats() -> List[str]:
    """
    Get list of accepted upload formats.

    Returns:
        List of file extensions (e.g., ['.jpeg', '.jpg', '.png'])
    """
    return sorted(list(SUPPORTED_UPLOAD_IMAGES))


def is_supported_format(file_path: Union[str, Path]) -> bool:
    """True if the file extension is an accepted upload format."""
    return Path(file_path).suffix.lower() in SUPPORTED_UPLOAD_IMAGES


def load_image_file(file_path: Union[str, Path]) -> PixelBuffer:
    """
    Load an uploaded image from disk.

    Args:
        file_path: Path to a PNG or JPEG file

    Returns:
        PixelBuffer in RGBA

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedImageError: If the extension is not PNG, JPG or JPEG
        PipelineError: If the file cannot be decoded
    """
    file_path = Path(file_path)

    if not is_supported_format(file_path):
        logger.warning(f"Rejected upload with unsupported format: {file_path.name}")
        raise UnsupportedImageError(UNSUPPORTED_FORMAT_MESSAGE)

    if not file_path.exists():
        raise FileNotFoundError(f"Image file not found: {file_path}")

    if not file_path.is_file():
        raise ValueError(f"Path is not a file: {file_path}")

    try:
        with Image.open(file_path) as img:
            img.load()
            buffer = PixelBuffer.from_image(img)
    except (OSError, UnidentifiedImageError) as e:
        raise PipelineError(f"Failed to load image from {file_path}: {str(e)}") from e

    logger.debug(f"Loaded {file_path.name} ({buffer.width}x{buffer.height})")
    return buffer


def decode_image_bytes(data: bytes) -> PixelBuffer:
    """
    Decode PNG/JPEG bytes into a PixelBuffer.

    Raises:
        PipelineError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return PixelBuffer.from_image(img)
    except (OSError, UnidentifiedImageError) as e:
        raise PipelineError(f"Failed to decode image data: {str(e)}") from e


def decode_data_url(url: str) -> PixelBuffer:
    """
    Decode a base64 image data URL returned by the image service.

    Raises:
        PipelineError: If the URL is malformed or its MIME type is not PNG/JPEG
    """
    match = _DATA_URL_PATTERN.match(url or "")
    if match is None:
        raise PipelineError("Invalid data URL")

    mime = match.group("mime").lower()
    if mime not in SUPPORTED_UPLOAD_MIME_TYPES:
        raise PipelineError(f"Unsupported data URL MIME type: {mime}")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise PipelineError(f"Invalid base64 payload in data URL: {str(e)}") from e

    return decode_image_bytes(data)


def encode_png_bytes(buffer: PixelBuffer) -> bytes:
    """Encode a buffer losslessly as PNG."""
    out = io.BytesIO()
    buffer.to_image().save(out, format="PNG")
    return out.getvalue()


def encode_data_url(buffer: PixelBuffer) -> str:
    """Encode a buffer as a ``data:image/png;base64,...`` URL."""
    payload = base64.b64encode(encode_png_bytes(buffer)).decode("ascii")
    return f"data:image/png;base64,{payload}"


def get_save_kwargs(save_format: str, quality: int = 95) -> Dict[str, Any]:
    """Get PIL Image.save() kwargs for a format name."""
    # PIL uses "JPEG" not "JPG"
    save_format = save_format.upper()
    if save_format == "JPG":
        save_format = "JPEG"

    kwargs: Dict[str, Any] = {"format": save_format}

    if save_format == "JPEG":
        kwargs["quality"] = max(1, min(100, quality))

    return kwargs


def save_image(
    buffer: PixelBuffer,
    output_path: Union[str, Path],
    save_format: Optional[str] = None,
) -> Path:
    """
    Write a buffer to disk.

    The format defaults to the file extension, falling back to PNG. JPEG output
    drops the alpha channel.

    Returns:
        The path written
    """
    output_path = Path(output_path)
    if save_format is None:
        suffix = output_path.suffix.lstrip(".")
        save_format = suffix if suffix else DEFAULT_OUTPUT_FORMAT

    kwargs = get_save_kwargs(save_format)
    image = buffer.to_image()
    if kwargs["format"] == "JPEG":
        image = image.convert("RGB")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        image.save(output_path, **kwargs)
    except (OSError, ValueError, KeyError) as e:
        raise PipelineError(f"Failed to save image to {output_path}: {str(e)}") from e

    logger.info(f"Saved {buffer.width}x{buffer.height} image to {output_path}")
    return output_path


def timestamped_name(prefix: str, extension: str = "jpeg", timestamp_ms: Optional[int] = None) -> str:
    """
    Build a name like ``generated-scene-1700000000000.jpeg``.

    Args:
        prefix: Name prefix (e.g., GENERATED_SCENE_PREFIX)
        extension: Extension without the dot
        timestamp_ms: Milliseconds since the epoch (default: now)
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}{timestamp_ms}.{extension}"
