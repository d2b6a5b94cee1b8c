"""
Scene History Stack.

Linear undo/redo over committed scene states. A commit drops every entry
after the cursor before appending, so there is never more than one redo
branch.

Classes:
    DebugArtifact: Optional image and prompt text returned by the compositor
    HistoryEntry: One immutable committed scene state
    HistoryStack: Entries plus a cursor

Example:
    >>> history = HistoryStack()
    >>> history.commit(HistoryEntry(image=scene, name="scene.png"))
    >>> history.commit(HistoryEntry(image=edited, name="edited-scene.png"))
    >>> history.undo()
    >>> history.current().name
    'scene.png'
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from SC_Libs.ImageEditingLib.image_models import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DebugArtifact:
    """Debug output attached to a generated scene."""
    image: Optional[PixelBuffer] = None
    prompt: Optional[str] = None


@dataclass(frozen=True)
class HistoryEntry:
    """A committed scene state.

    Attributes:
        image: Full-resolution scene pixels
        name: Scene label sent to the compositor on the next generation
        debug: Optional debug artifact from the compositor
    """
    image: PixelBuffer
    name: str = "scene.png"
    debug: Optional[DebugArtifact] = None

    def __post_init__(self):
        if not isinstance(self.image, PixelBuffer):
            raise TypeError(f"HistoryEntry.image must be a PixelBuffer, got {type(self.image)}")


class HistoryStack:
    """Committed scene states with a movable cursor.

    The cursor is -1 exactly when the stack is empty, otherwise it indexes an
    existing entry.
    """

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._cursor = -1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def commit(self, entry: HistoryEntry) -> None:
        """Drop the redo branch, append ``entry`` and move the cursor onto it."""
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Expected HistoryEntry, got {type(entry)}")

        dropped = len(self._entries) - (self._cursor + 1)
        del self._entries[self._cursor + 1:]
        self._entries.append(entry)
        self._cursor = len(self._entries) - 1

        if dropped:
            logger.debug(f"History: discarded {dropped} redo entr{'y' if dropped == 1 else 'ies'}")
        logger.debug(f"History: committed '{entry.name}' at {self._cursor}")

    def undo(self) -> bool:
        """Step back one entry. Returns False (no-op) at the first entry."""
        if not self.can_undo:
            return False
        self._cursor -= 1
        logger.debug(f"History: undo to {self._cursor}")
        return True

    def redo(self) -> bool:
        """Step forward one entry. Returns False (no-op) at the last entry."""
        if not self.can_redo:
            return False
        self._cursor += 1
        logger.debug(f"History: redo to {self._cursor}")
        return True

    def current(self) -> Optional[HistoryEntry]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def reset(self) -> None:
        self._entries.clear()
        self._cursor = -1
        logger.debug("History: reset")
