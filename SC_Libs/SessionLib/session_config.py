"""
Session configuration.

Classes:
    SessionConfig: Tunables for an editing session

Functions:
    load_session_config: Read a SessionConfig from a JSON file
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Union

from SC_Libs.constants import (
    BRUSH_SIZE_STEP,
    DEFAULT_BRUSH_SIZE,
    DEFAULT_OUTPUT_FORMAT,
    MAX_BRUSH_SIZE,
    MIN_BRUSH_SIZE,
    PREVIEW_MAX_DIM,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SessionConfig:
    """Configuration for an editing session.

    Attributes:
        preview_max_dim: Longest side of preview renders in pixels (default: 800)
        brush_size: On-screen brush width for mask strokes (10-100, step 5)
        output_format: Format used when the CLI saves results (default: PNG)
        log_level: Logging level name used by the CLI (default: INFO)
    """
    preview_max_dim: int = PREVIEW_MAX_DIM
    brush_size: int = DEFAULT_BRUSH_SIZE
    output_format: str = DEFAULT_OUTPUT_FORMAT
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.preview_max_dim < 1:
            raise ValueError(f"preview_max_dim must be >= 1, got {self.preview_max_dim}")

        if not (MIN_BRUSH_SIZE <= self.brush_size <= MAX_BRUSH_SIZE):
            raise ValueError(
                f"brush_size must be {MIN_BRUSH_SIZE}-{MAX_BRUSH_SIZE}, got {self.brush_size}"
            )

        if (self.brush_size - MIN_BRUSH_SIZE) % BRUSH_SIZE_STEP != 0:
            raise ValueError(f"brush_size must be a multiple of {BRUSH_SIZE_STEP}, got {self.brush_size}")

        if self.output_format.upper() not in ("PNG", "JPG", "JPEG"):
            raise ValueError(f"Unsupported output_format: {self.output_format}")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def load_session_config(path: Union[str, Path]) -> SessionConfig:
    """
    Load a SessionConfig from JSON.

    Unknown keys are ignored; missing keys take their defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON is malformed or a value is invalid
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid session config {path}: {str(e)}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Session config {path} must contain a JSON object")

    config = SessionConfig.from_dict(data)
    logger.debug(f"Loaded session config from {path}: {config.to_dict()}")
    return config
