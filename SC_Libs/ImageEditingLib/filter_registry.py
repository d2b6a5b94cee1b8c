"""
Filter Stage Registry.

This module provides a centralized registry for edit pipeline stages. It enables
registration, lookup, and execution of the filters that make up an editing pass.

Classes:
    FilterRegistry: Registry for filter stage executors

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_filters: Register the built-in sharpen, color and vignette stages
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from SC_Libs.constants import FILTER_COLOR_ADJUST, FILTER_SHARPEN, FILTER_VIGNETTE
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer

logger = logging.getLogger(__name__)

# Type alias for filter stage function
FilterFunction = Callable[[PixelBuffer, Edits], PixelBuffer]


class FilterRegistry:
    """
    Registry for filter stage executors.

    Example:
        >>> registry = FilterRegistry()
        >>> registry.register("Sharpen", execute_sharpen_stage)
        >>> result = registry.execute("Sharpen", buffer, edits)
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._filters: Dict[str, FilterFunction] = {}
        self._filter_metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        filter_type: str,
        executor: FilterFunction,
        description: str = "",
        edit_fields: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register a filter stage.

        Args:
            filter_type: Unique name for the stage (e.g., "Sharpen")
            executor: Callable accepting (buffer, edits) and returning a buffer
            description: Human-readable description of the stage
            edit_fields: Edits fields the stage reads
            tags: Optional list of tags for categorization

        Raises:
            ValueError: If filter_type is empty or executor is not callable
            RuntimeError: If filter_type is already registered
        """
        filter_type = str(filter_type).strip()

        if not filter_type:
            raise ValueError("filter_type cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if filter_type in self._filters:
            raise RuntimeError(
                f"Filter type '{filter_type}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._filters[filter_type] = executor
        self._filter_metadata[filter_type] = {
            "description": str(description),
            "edit_fields": list(edit_fields) if edit_fields else [],
            "tags": list(tags) if tags else [],
        }

        logger.debug(f"Registered filter stage: {filter_type}")

    def unregister(self, filter_type: str) -> bool:
        """
        Unregister a filter stage.

        Returns:
            True if unregistered, False if filter_type was not registered
        """
        filter_type = str(filter_type).strip()

        if filter_type in self._filters:
            del self._filters[filter_type]
            del self._filter_metadata[filter_type]
            logger.debug(f"Unregistered filter stage: {filter_type}")
            return True

        return False

    def get_executor(self, filter_type: str) -> FilterFunction:
        """
        Get the executor for a filter stage.

        Raises:
            KeyError: If filter_type is not registered
        """
        filter_type = str(filter_type).strip()

        if filter_type not in self._filters:
            available = ", ".join(self.list_filter_types())
            raise KeyError(
                f"No filter registered for type '{filter_type}'. "
                f"Available types: {available}"
            )

        return self._filters[filter_type]

    def has_filter(self, filter_type: str) -> bool:
        return str(filter_type).strip() in self._filters

    def execute(self, filter_type: str, buffer: PixelBuffer, edits: Edits) -> PixelBuffer:
        """
        Run one filter stage.

        Raises:
            KeyError: If filter_type is not registered
            Exception: Any exception raised by the executor
        """
        executor = self.get_executor(filter_type)
        return executor(buffer, edits)

    def list_filter_types(self) -> List[str]:
        """Sorted list of registered filter names."""
        return sorted(self._filters.keys())

    def get_metadata(self, filter_type: str) -> Dict[str, Any]:
        """
        Get metadata for a filter stage.

        Raises:
            KeyError: If filter_type is not registered
        """
        filter_type = str(filter_type).strip()

        if filter_type not in self._filter_metadata:
            raise KeyError(f"No metadata for filter type: {filter_type}")

        return dict(self._filter_metadata[filter_type])

    def filter_by_tag(self, tag: str) -> List[str]:
        """Sorted list of filter names carrying ``tag`` (case-insensitive)."""
        tag = str(tag).strip().lower()
        return sorted([
            filter_type
            for filter_type, meta in self._filter_metadata.items()
            if tag in [t.lower() for t in meta.get("tags", [])]
        ])

    def clear(self) -> None:
        """Clear all registered filters. Use with caution."""
        self._filters.clear()
        self._filter_metadata.clear()
        logger.warning("Filter registry cleared")


# Global singleton registry
_default_registry: Optional[FilterRegistry] = None


def get_default_registry() -> FilterRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in filters.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = FilterRegistry()
        register_default_filters(_default_registry)

    return _default_registry


def register_default_filters(registry: FilterRegistry) -> None:
    """
    Register the built-in edit stages: Sharpen, Color Adjust and Vignette.

    Args:
        registry: The registry to register filters with
    """
    from SC_Libs.ImageEditingLib.sharpen_filter import execute_sharpen_stage
    from SC_Libs.ImageEditingLib.color_adjust_filter import execute_color_adjust_stage
    from SC_Libs.ImageEditingLib.vignette_filter import execute_vignette_stage

    registry.register(
        filter_type=FILTER_SHARPEN,
        executor=execute_sharpen_stage,
        description="3x3 sharpen convolution blended by amount",
        edit_fields=["sharpen"],
        tags=["convolution", "detail"],
    )

    registry.register(
        filter_type=FILTER_COLOR_ADJUST,
        executor=execute_color_adjust_stage,
        description="Brightness, contrast and saturation",
        edit_fields=["brightness", "contrast", "saturation"],
        tags=["color", "tonal"],
    )

    registry.register(
        filter_type=FILTER_VIGNETTE,
        executor=execute_vignette_stage,
        description="Radial darkening overlay",
        edit_fields=["vignette"],
        tags=["overlay", "tonal"],
    )

    logger.info("Registered default filter stages")
