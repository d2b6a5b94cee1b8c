"""
SessionLib - Editing session state

History stack, placement model, external service interface, user intents,
session configuration and the controller tying them together.
"""

from SC_Libs.SessionLib.history_stack import DebugArtifact, HistoryEntry, HistoryStack
from SC_Libs.SessionLib.placement_model import (
    PlacementModel,
    PlacementProposal,
    PlacementRequest,
    Product,
    ProductSlot,
)
from SC_Libs.SessionLib.services import CompositeResult, SceneServices
from SC_Libs.SessionLib.session_config import SessionConfig, load_session_config
from SC_Libs.SessionLib.edit_session import EditOutcome, EditSessionController

__all__ = [
    "DebugArtifact",
    "HistoryEntry",
    "HistoryStack",
    "PlacementModel",
    "PlacementProposal",
    "PlacementRequest",
    "Product",
    "ProductSlot",
    "CompositeResult",
    "SceneServices",
    "SessionConfig",
    "load_session_config",
    "EditOutcome",
    "EditSessionController",
]
