"""
Product Placement Model.

Holds the one placement proposal that exists between dropping a product on
the scene and confirming or cancelling it. The model accepts any sequence of
calls; rejecting a second proposal is the session controller's job.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from SC_Libs.constants import DEFAULT_PLACEMENT_SCALE
from SC_Libs.errors import NoProposalError
from SC_Libs.GeometryLib.gestures import clamp_scale
from SC_Libs.GeometryLib.letterbox import PercentPoint
from SC_Libs.ImageEditingLib.image_models import PixelBuffer

logger = logging.getLogger(__name__)


class ProductSlot(Enum):
    PRODUCT_1 = "product1"
    PRODUCT_2 = "product2"


@dataclass(frozen=True)
class Product:
    """A product image loaded into one of the two slots."""
    slot: ProductSlot
    name: str
    image: PixelBuffer


def _clamp_position(position) -> PercentPoint:
    return PercentPoint(
        min(100.0, max(0.0, float(position[0]))),
        min(100.0, max(0.0, float(position[1]))),
    )


@dataclass(frozen=True)
class PlacementProposal:
    """Uncommitted placement.

    Attributes:
        source: Product slot being placed
        position: Percent of scene content, origin top-left, each in [0, 100]
        scale: Product scale, clamped to the placement scale bounds
    """
    source: ProductSlot
    position: PercentPoint
    scale: float = DEFAULT_PLACEMENT_SCALE

    def __post_init__(self):
        object.__setattr__(self, "position", _clamp_position(self.position))
        object.__setattr__(self, "scale", clamp_scale(float(self.scale)))


@dataclass(frozen=True)
class PlacementRequest:
    """Everything the compositor needs for one confirmed placement."""
    product_image: PixelBuffer
    product_label: str
    scene_image: PixelBuffer
    scene_label: str
    position: PercentPoint
    scale: float


class PlacementModel:
    """Current placement proposal, if any."""

    def __init__(self):
        self._proposal: Optional[PlacementProposal] = None

    @property
    def active(self) -> Optional[PlacementProposal]:
        return self._proposal

    @property
    def is_active(self) -> bool:
        return self._proposal is not None

    def propose(self, source: ProductSlot, position) -> PlacementProposal:
        """Start a proposal at ``position`` with the default scale."""
        self._proposal = PlacementProposal(source=source, position=_clamp_position(position))
        logger.debug(f"Placement proposed: {source.value} at ({self._proposal.position.x:.1f}, {self._proposal.position.y:.1f})")
        return self._proposal

    def update(self, position=None, scale: Optional[float] = None) -> PlacementProposal:
        """
        Replace position and/or scale of the active proposal.

        Raises:
            NoProposalError: If there is no active proposal
        """
        if self._proposal is None:
            raise NoProposalError("No placement to update")

        changes = {}
        if position is not None:
            changes["position"] = _clamp_position(position)
        if scale is not None:
            changes["scale"] = scale
        if changes:
            self._proposal = replace(self._proposal, **changes)
        return self._proposal

    def cancel(self) -> None:
        if self._proposal is not None:
            logger.debug("Placement cancelled")
        self._proposal = None

    def confirm(self, product: Product, scene_image: PixelBuffer, scene_label: str) -> PlacementRequest:
        """
        Snapshot the proposal into a compositor request.

        The proposal stays active until the caller clears it, so a failed
        request can be retried.

        Raises:
            NoProposalError: If there is no active proposal
        """
        if self._proposal is None:
            raise NoProposalError("No placement to confirm")

        return PlacementRequest(
            product_image=product.image,
            product_label=product.name,
            scene_image=scene_image,
            scene_label=scene_label,
            position=self._proposal.position,
            scale=self._proposal.scale,
        )
