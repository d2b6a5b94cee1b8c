"""
External image service interface.

The session controller talks to the image generation backend only through
SceneServices. Implementations may block; the controller always calls them
from a worker thread. Any exception they raise is wrapped in
ExternalServiceError by the controller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from SC_Libs.GeometryLib.letterbox import PercentPoint
from SC_Libs.ImageEditingLib.image_models import PixelBuffer


@dataclass(frozen=True)
class CompositeResult:
    """Output of a compositing call."""
    final_image: PixelBuffer
    debug_image: Optional[PixelBuffer] = None
    debug_prompt: Optional[str] = None


class SceneServices(ABC):
    """Remote compositing, background removal and inpainting."""

    @abstractmethod
    def composite_scene(
        self,
        product_image: PixelBuffer,
        product_label: str,
        scene_image: PixelBuffer,
        scene_label: str,
        position: PercentPoint,
        scale: float,
    ) -> CompositeResult:
        """Place the product into the scene at ``position`` (percent) and ``scale``."""

    @abstractmethod
    def remove_background(self, product_image: PixelBuffer) -> PixelBuffer:
        """Return the product with its background made transparent."""

    @abstractmethod
    def remove_background_with_mask(self, product_image: PixelBuffer, mask: PixelBuffer) -> PixelBuffer:
        """Remove the background areas marked white in ``mask``."""

    @abstractmethod
    def inpaint(self, scene_image: PixelBuffer, mask: PixelBuffer) -> PixelBuffer:
        """Fill the areas marked white in ``mask`` from their surroundings."""
