"""Typed input commands consumed one at a time by ``ViewController``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ToggleItem:
    key: str


@dataclass(frozen=True)
class ToggleSlot:
    slot_index: int


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class SetLanguage:
    language: str


@dataclass(frozen=True)
class Return:
    pass


Command = Union[ToggleItem, ToggleSlot, Submit, SetLanguage, Return]
