"""
Selection Manager
=================
Up to three chosen grid items, each bound to one of three fixed display
slots. Slot binding is explicit (``slot_index``) rather than implied by list
position, so clearing the middle slot leaves the others where they are and
the next pick fills the gap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

SLOT_COUNT = 3


@dataclass(frozen=True)
class SelectionEntry:
    key: str
    slot_index: int


class SelectionSet:
    """Ordered set of at most ``capacity`` entries with unique keys and slots."""

    def __init__(self, capacity: int = SLOT_COUNT) -> None:
        self.capacity = capacity
        self._entries: List[SelectionEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SelectionEntry]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self._entries)

    @property
    def entries(self) -> List[SelectionEntry]:
        return list(self._entries)

    def keys(self) -> List[str]:
        """Selected keys in slot order."""
        return [entry.key for entry in sorted(self._entries, key=lambda e: e.slot_index)]

    def entry_at(self, slot_index: int) -> Optional[SelectionEntry]:
        for entry in self._entries:
            if entry.slot_index == slot_index:
                return entry
        return None

    def is_full(self) -> bool:
        return len(self._entries) == self.capacity

    def _lowest_free_slot(self) -> int:
        used = {entry.slot_index for entry in self._entries}
        return next(index for index in range(self.capacity) if index not in used)

    def toggle_item(self, key: str) -> bool:
        """
        Remove ``key`` if selected, otherwise bind it to the lowest free slot.
        When full, a new key is rejected silently. Returns ``True`` when the
        set changed.
        """
        for entry in self._entries:
            if entry.key == key:
                self._entries.remove(entry)
                return True
        if self.is_full():
            return False
        self._entries.append(SelectionEntry(key=key, slot_index=self._lowest_free_slot()))
        return True

    def toggle_slot(self, slot_index: int) -> bool:
        """Clear ``slot_index``. Slots are only ever filled by ``toggle_item``."""
        entry = self.entry_at(slot_index)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def reset(self) -> None:
        self._entries.clear()

    def __repr__(self) -> str:
        return f"SelectionSet({self._entries!r})"
