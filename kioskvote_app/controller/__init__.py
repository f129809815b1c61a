"""Selection & view controller of the kiosk, independent of Flask."""

from .backend import KioskBackend, Renderer
from .commands import Command, Return, SetLanguage, Submit, ToggleItem, ToggleSlot
from .exceptions import AssetLoadFailure, KioskError, NetworkFailure
from .selection import SLOT_COUNT, SelectionEntry, SelectionSet
from .state import (
    ControllerState,
    PrecomputedResult,
    SelectionView,
    ViewState,
    build_selection_view,
)
from .view_controller import ViewController

__all__ = [
    "AssetLoadFailure",
    "Command",
    "ControllerState",
    "KioskBackend",
    "KioskError",
    "NetworkFailure",
    "PrecomputedResult",
    "Renderer",
    "Return",
    "SLOT_COUNT",
    "SelectionEntry",
    "SelectionSet",
    "SelectionView",
    "SetLanguage",
    "Submit",
    "ToggleItem",
    "ToggleSlot",
    "ViewController",
    "ViewState",
    "build_selection_view",
]
