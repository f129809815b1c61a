"""
Kiosk collaborators
===================
Abstract contracts the controller talks to. The controller never knows
whether votes travel over HTTP or stay in-process; it only awaits these
coroutines.

Failure contract
----------------
* ``NetworkFailure`` for any rejected call.
* ``AssetLoadFailure`` when a result image cannot be fetched.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Sequence

from .state import ControllerState, PrecomputedResult, SelectionView


class KioskBackend(ABC):

    @abstractmethod
    async def submit_vote(self, keys: Sequence[str], language: str, submission_id: str) -> None:
        """Record the ballot. Raises ``NetworkFailure``."""
        ...

    @abstractmethod
    async def precompute_result(self, keys: Sequence[str], language: str,
                                submission_id: str) -> PrecomputedResult:
        """
        Render the result asset of every language for this ballot. Called
        once per transition. Raises ``NetworkFailure``.
        """
        ...

    @abstractmethod
    async def commit_result(self, submission_id: str) -> None:
        """Promote the precomputed result to the canonical one. Raises ``NetworkFailure``."""
        ...

    @abstractmethod
    async def fetch_result_asset(self, result: PrecomputedResult, language: str) -> bytes:
        """Download the image for ``language``. Raises ``AssetLoadFailure``."""
        ...

    @abstractmethod
    async def translate(self, language: str) -> Dict[str, str]:
        """Display strings of ``language``. Raises ``NetworkFailure``."""
        ...


class Renderer(ABC):
    """
    Output side of the kiosk. ``launch_duration`` is whatever the front end's
    launch animation takes; the controller only waits for it.
    """

    def __init__(self, launch_duration: float = 0.0) -> None:
        self.launch_duration = launch_duration

    @abstractmethod
    def render_selection(self, view: SelectionView, state: ControllerState) -> None:
        ...

    @abstractmethod
    def render_result(self, state: ControllerState, image: bytes) -> None:
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Non-blocking notice; must not wait for acknowledgement."""
        ...

    def render_texts(self, state: ControllerState) -> None:
        """Hook for static strings (title, buttons) after a language change."""

    async def play_launch_animation(self) -> None:
        await asyncio.sleep(self.launch_duration)
