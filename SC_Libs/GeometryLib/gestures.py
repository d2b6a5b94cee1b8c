"""
Drag and Pinch Gestures.

Pure gesture math plus a small state machine that turns raw pointer / touch
contacts into placement updates.

Drag positions are always computed from the position at gesture start, never
accumulated frame to frame. Pinch scale is the start scale times the ratio of
the current to the starting contact distance, clamped to the placement scale
bounds.

A single input stream is either dragging or pinching. A second contact during
a drag switches to pinch; after the pinch ends, translation stays suspended
until every contact has lifted.

Example:
    >>> tracker = GestureTracker(container_size=(800, 600))
    >>> tracker.pointer_down(1, (100, 100), position=(50, 50), scale=1.0)
    >>> tracker.pointer_move(1, (180, 160)).position
    PercentPoint(x=60.0, y=60.0)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from SC_Libs.constants import MAX_PLACEMENT_SCALE, MIN_PLACEMENT_SCALE
from SC_Libs.errors import InputShapeError
from SC_Libs.GeometryLib.letterbox import PercentPoint, Point

logger = logging.getLogger(__name__)


def pointer_distance(a, b) -> float:
    """Euclidean distance between two pointer samples."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def clamp_scale(scale: float) -> float:
    """Clamp a placement scale to [MIN_PLACEMENT_SCALE, MAX_PLACEMENT_SCALE]."""
    return min(MAX_PLACEMENT_SCALE, max(MIN_PLACEMENT_SCALE, scale))


def pinch_scale(initial_scale: float, start_distance: float, current_distance: float) -> float:
    """
    Scale after a pinch.

    A zero start distance gives a factor of 1 (the initial scale, clamped).
    """
    if start_distance <= 0:
        return clamp_scale(initial_scale)
    return clamp_scale(initial_scale * (current_distance / start_distance))


def drag_position(start_position, start_pointer, current_pointer, container_size) -> PercentPoint:
    """
    Position after a drag, relative to where the gesture started.

    The pointer delta is converted to percent by dividing by the container
    width and height. The result is clamped to [0, 100] on both axes.

    Raises:
        InputShapeError: If the container size is not positive
    """
    width, height = container_size
    if width <= 0 or height <= 0:
        raise InputShapeError(f"Container size must be positive, got {width}x{height}")

    dx = (current_pointer[0] - start_pointer[0]) / width * 100.0
    dy = (current_pointer[1] - start_pointer[1]) / height * 100.0
    return PercentPoint(
        min(100.0, max(0.0, start_position[0] + dx)),
        min(100.0, max(0.0, start_position[1] + dy)),
    )


class GestureMode(Enum):
    IDLE = "idle"
    DRAG = "drag"
    PINCH = "pinch"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class PlacementUpdate:
    """Change produced by one gesture sample. Unset fields are unchanged."""
    position: Optional[PercentPoint] = None
    scale: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.position is None and self.scale is None


class GestureTracker:
    """Tracks up to two contacts on one input stream."""

    def __init__(self, container_size):
        self.container_size = container_size
        self._contacts: Dict[int, Point] = {}
        self._mode = GestureMode.IDLE
        self._start_pointer: Optional[Point] = None
        self._start_position: Optional[PercentPoint] = None
        self._start_scale = 1.0
        self._start_distance = 0.0

    @property
    def mode(self) -> GestureMode:
        return self._mode

    @property
    def contact_count(self) -> int:
        return len(self._contacts)

    def pointer_down(self, pointer_id: int, point, position, scale: float) -> None:
        """
        Register a new contact.

        Args:
            pointer_id: Stable id of the contact
            point: Container-relative pointer position
            position: Placement position when the contact lands
            scale: Placement scale when the contact lands
        """
        if pointer_id in self._contacts or len(self._contacts) >= 2:
            return

        self._contacts[pointer_id] = Point(float(point[0]), float(point[1]))

        if self._mode == GestureMode.IDLE and len(self._contacts) == 1:
            self._mode = GestureMode.DRAG
            self._start_pointer = self._contacts[pointer_id]
            self._start_position = PercentPoint(float(position[0]), float(position[1]))
            logger.debug("Gesture: drag started")
        elif len(self._contacts) == 2:
            a, b = self._contacts.values()
            self._mode = GestureMode.PINCH
            self._start_scale = float(scale)
            self._start_distance = pointer_distance(a, b)
            logger.debug(f"Gesture: pinch started at distance {self._start_distance:.1f}")

    def pointer_move(self, pointer_id: int, point) -> PlacementUpdate:
        """Move a contact and return the resulting placement change."""
        if pointer_id not in self._contacts:
            return PlacementUpdate()

        self._contacts[pointer_id] = Point(float(point[0]), float(point[1]))

        if self._mode == GestureMode.DRAG:
            return PlacementUpdate(position=drag_position(
                self._start_position, self._start_pointer, self._contacts[pointer_id], self.container_size
            ))

        if self._mode == GestureMode.PINCH:
            a, b = self._contacts.values()
            distance = pointer_distance(a, b)
            if self._start_distance <= 0:
                # Re-establish the baseline once the contacts separate.
                self._start_distance = distance
                return PlacementUpdate(scale=clamp_scale(self._start_scale))
            return PlacementUpdate(scale=pinch_scale(self._start_scale, self._start_distance, distance))

        return PlacementUpdate()

    def pointer_up(self, pointer_id: int) -> None:
        """Lift a contact."""
        if pointer_id not in self._contacts:
            return
        del self._contacts[pointer_id]

        if not self._contacts:
            self.reset()
        elif self._mode == GestureMode.PINCH:
            self._mode = GestureMode.SUSPENDED
            logger.debug("Gesture: pinch ended, translation suspended")

    def reset(self) -> None:
        self._contacts.clear()
        self._mode = GestureMode.IDLE
        self._start_pointer = None
        self._start_position = None
        self._start_scale = 1.0
        self._start_distance = 0.0
