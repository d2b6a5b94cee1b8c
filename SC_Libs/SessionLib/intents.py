"""
User intents accepted by EditSessionController.dispatch().

Pointer coordinates are relative to the top-left of the display container.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from SC_Libs.SessionLib.placement_model import ProductSlot

PointerPosition = Tuple[float, float]


@dataclass(frozen=True)
class PointerDown:
    pointer_id: int
    position: PointerPosition


@dataclass(frozen=True)
class PointerMove:
    pointer_id: int
    position: PointerPosition


@dataclass(frozen=True)
class PointerUp:
    pointer_id: int


@dataclass(frozen=True)
class SliderChanged:
    field: str
    value: int


@dataclass(frozen=True)
class PlaceProduct:
    """A product was dropped at ``position`` on the scene display."""
    source: ProductSlot
    position: PointerPosition


@dataclass(frozen=True)
class SetPlacementScale:
    scale: float


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class CommitEdits:
    pass


@dataclass(frozen=True)
class CommitPlacement:
    pass


@dataclass(frozen=True)
class CancelPlacement:
    pass


@dataclass(frozen=True)
class ToggleMaskMode:
    pass


@dataclass(frozen=True)
class ConfirmMask:
    pass


Intent = Union[
    PointerDown,
    PointerMove,
    PointerUp,
    SliderChanged,
    PlaceProduct,
    SetPlacementScale,
    Undo,
    Redo,
    CommitEdits,
    CommitPlacement,
    CancelPlacement,
    ToggleMaskMode,
    ConfirmMask,
]
