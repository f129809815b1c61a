"""
Controller state and its render projection.

``ControllerState`` is owned by ``ViewController`` and handed by reference
to the renderer; nothing here is module-global.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .selection import SelectionSet


class ViewState(Enum):
    SELECTING = "selecting"
    TRANSITIONING = "transitioning"
    RESULT_SHOWN = "result_shown"


@dataclass
class PrecomputedResult:
    """Result assets rendered for one submission, one URL per language."""

    submission_id: str
    assets: Dict[str, str] = field(default_factory=dict)

    def asset_for(self, language: str) -> Optional[str]:
        return self.assets.get(language)


@dataclass
class ControllerState:
    selection: SelectionSet = field(default_factory=SelectionSet)
    view: ViewState = ViewState.SELECTING
    language: str = "en"
    translations: Dict[str, str] = field(default_factory=dict)
    result: Optional[PrecomputedResult] = None
    error: Optional[str] = None                 # last non-blocking notice

    @property
    def interactive(self) -> bool:
        return self.view is ViewState.SELECTING

    def text(self, key: str) -> str:
        return self.translations.get(key) or key


@dataclass(frozen=True)
class ItemView:
    key: str
    label: str
    selected: bool
    disabled: bool


@dataclass(frozen=True)
class SlotView:
    slot_index: int
    key: Optional[str]
    label: str


@dataclass(frozen=True)
class SelectionView:
    items: List[ItemView]
    slots: List[SlotView]
    submit_enabled: bool


def build_selection_view(state: ControllerState, items: Sequence[str]) -> SelectionView:
    """
    Project the selection onto the grid and the slots. Non-selected items are
    disabled exactly when the selection is full; everything is disabled while
    not selecting.
    """
    selection = state.selection
    full = selection.is_full()
    interactive = state.interactive

    item_views = []
    for key in items:
        selected = key in selection
        item_views.append(ItemView(
            key=key,
            label=state.text(key),
            selected=selected,
            disabled=not interactive or (full and not selected),
        ))

    slot_views = []
    for slot_index in range(selection.capacity):
        entry = selection.entry_at(slot_index)
        slot_views.append(SlotView(
            slot_index=slot_index,
            key=entry.key if entry else None,
            label=state.text(entry.key) if entry else state.translations.get("slot_empty", ""),
        ))

    return SelectionView(items=item_views, slots=slot_views, submit_enabled=interactive and full)
