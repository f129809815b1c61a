"""
View Transition Controller
==========================

States::

    SELECTING --Submit (full)--> TRANSITIONING --animation + vote + precompute--> RESULT_SHOWN
        ^                              |                                              |
        +------ any failure -----------+                                              |
        +------------------ Return / idle timeout ------------------------------------+

Runs on one asyncio event loop. Selection commands mutate the state
synchronously; the network calls of a transition run in a background task so
the loop keeps serving the idle timer and language switches. The only
cancellable unit is the idle return timer.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable, List, Optional, Sequence

from .backend import KioskBackend, Renderer
from .commands import Command, Return, SetLanguage, Submit, ToggleItem, ToggleSlot
from .exceptions import AssetLoadFailure, KioskError
from .selection import SLOT_COUNT, SelectionSet
from .state import ControllerState, PrecomputedResult, ViewState, build_selection_view

logger = logging.getLogger(__name__)


class ViewController:

    def __init__(
        self,
        backend: KioskBackend,
        renderer: Renderer,
        items: Sequence[str],
        language: str = "en",
        idle_timeout: float = 30.0,
        capacity: int = SLOT_COUNT,
        submission_id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.backend = backend
        self.renderer = renderer
        self.items = list(items)
        self.idle_timeout = idle_timeout
        self.state = ControllerState(selection=SelectionSet(capacity), language=language)
        self._new_submission_id = submission_id_factory or (lambda: uuid.uuid4().hex)
        self._transition: Optional[asyncio.Task] = None
        self._return_timer: Optional[asyncio.TimerHandle] = None
        self._queue: Optional[asyncio.Queue] = None

    # ── lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        """Load the initial language and draw the grid."""
        if not await self.set_language(self.state.language):
            self._render_selection()

    async def run(self) -> None:
        """Consume posted commands one at a time until ``stop`` is called."""
        queue = self._ensure_queue()
        while True:
            command = await queue.get()
            try:
                if command is None:
                    return
                await self.dispatch(command)
            except Exception:
                logger.exception("Command %r failed", command)
            finally:
                queue.task_done()

    def post(self, command: Command) -> None:
        self._ensure_queue().put_nowait(command)

    def stop(self) -> None:
        self._ensure_queue().put_nowait(None)

    async def close(self) -> None:
        """Cancel the idle timer and any transition still in flight."""
        self._cancel_return_timer()
        if self._transition is not None and not self._transition.done():
            self._transition.cancel()
            await asyncio.gather(self._transition, return_exceptions=True)

    def _ensure_queue(self) -> asyncio.Queue:
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    # ── dispatcher ───────────────────────────────────────────────────

    async def dispatch(self, command: Command) -> None:
        if isinstance(command, ToggleItem):
            self.toggle_item(command.key)
        elif isinstance(command, ToggleSlot):
            self.toggle_slot(command.slot_index)
        elif isinstance(command, Submit):
            self.submit()
        elif isinstance(command, SetLanguage):
            await self.set_language(command.language)
        elif isinstance(command, Return):
            self.return_to_selecting()
        else:
            raise TypeError(f"Unknown command {command!r}")

    # ── selection ────────────────────────────────────────────────────

    def is_full(self) -> bool:
        return self.state.selection.is_full()

    def toggle_item(self, key: str) -> bool:
        if not self.state.interactive:
            logger.debug("Ignoring toggle of %s while %s", key, self.state.view.value)
            return False
        if key not in self.items:
            logger.warning("Ignoring unknown item %r", key)
            return False
        changed = self.state.selection.toggle_item(key)
        if changed:
            self._render_selection()
        return changed

    def toggle_slot(self, slot_index: int) -> bool:
        if not self.state.interactive:
            logger.debug("Ignoring slot %s while %s", slot_index, self.state.view.value)
            return False
        changed = self.state.selection.toggle_slot(slot_index)
        if changed:
            self._render_selection()
        return changed

    def _render_selection(self) -> None:
        self.renderer.render_selection(build_selection_view(self.state, self.items), self.state)

    # ── transition ───────────────────────────────────────────────────

    @property
    def transition(self) -> Optional[asyncio.Task]:
        return self._transition

    def submit(self) -> Optional[asyncio.Task]:
        """Start the launch transition. No-op unless selecting with a full selection."""
        if self.state.view is not ViewState.SELECTING:
            logger.debug("Submit ignored while %s", self.state.view.value)
            return None
        if not self.is_full():
            logger.debug("Submit ignored, only %d items selected", len(self.state.selection))
            return None

        keys = self.state.selection.keys()
        self.state.view = ViewState.TRANSITIONING
        self.state.error = None
        self._render_selection()

        self._transition = asyncio.get_running_loop().create_task(
            self._run_transition(keys, self.state.language)
        )
        return self._transition

    async def wait_for_transition(self) -> None:
        if self._transition is not None:
            await asyncio.gather(self._transition, return_exceptions=True)

    async def _run_transition(self, keys: List[str], language: str) -> None:
        submission_id = self._new_submission_id()
        logger.info("Launching vote %s: %s (%s)", submission_id, ", ".join(keys), language)

        animation = asyncio.ensure_future(self.renderer.play_launch_animation())
        vote = asyncio.ensure_future(self.backend.submit_vote(keys, language, submission_id))
        precompute = asyncio.ensure_future(self.backend.precompute_result(keys, language, submission_id))

        try:
            await self._collect([animation, vote, precompute])
            result = precompute.result()

            try:
                await self.backend.commit_result(result.submission_id)
            except Exception as exc:
                logger.warning("Commit of %s failed, showing the precomputed result anyway: %s",
                               result.submission_id, exc)

            # The language may have changed while the animation played
            shown_language = self.state.language
            image = await self.backend.fetch_result_asset(result, shown_language)
            self._show_result(result, image)
        except KioskError as exc:
            logger.warning("Transition %s aborted: %s", submission_id, exc)
            self._abort_transition()
        except asyncio.CancelledError:
            for task in (animation, vote, precompute):
                task.cancel()
            raise
        except Exception:
            logger.exception("Transition %s failed unexpectedly", submission_id)
            self._abort_transition()

    @staticmethod
    async def _collect(tasks: List[asyncio.Future]) -> None:
        """Wait for every task; on the first failure cancel the rest and re-raise it."""
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        errors = [task.exception() for task in tasks
                  if task in done and not task.cancelled() and task.exception() is not None]
        if errors:
            raise errors[0]

    def _abort_transition(self) -> None:
        self._cancel_return_timer()
        self.state.view = ViewState.SELECTING
        self.state.result = None
        self.state.error = self.state.text("error_generic")
        self._render_selection()
        self.renderer.show_error(self.state.error)

    def _show_result(self, result: PrecomputedResult, image: bytes) -> None:
        self.state.result = result
        self.state.view = ViewState.RESULT_SHOWN
        self.renderer.render_result(self.state, image)
        self._schedule_return()
        logger.info("Showing result %s", result.submission_id)

    # ── return ───────────────────────────────────────────────────────

    def return_to_selecting(self) -> bool:
        """Manual return from the result screen."""
        if self.state.view is not ViewState.RESULT_SHOWN:
            return False
        self._cancel_return_timer()
        self._enter_selecting()
        return True

    def _schedule_return(self) -> None:
        self._cancel_return_timer()
        loop = asyncio.get_running_loop()
        self._return_timer = loop.call_later(self.idle_timeout, self._on_idle_timeout)

    def _cancel_return_timer(self) -> None:
        if self._return_timer is not None:
            self._return_timer.cancel()
            self._return_timer = None

    def _on_idle_timeout(self) -> None:
        self._return_timer = None
        if self.state.view is ViewState.RESULT_SHOWN:
            logger.info("Idle for %.0fs, returning to selection", self.idle_timeout)
            self._enter_selecting()

    def _enter_selecting(self) -> None:
        self.state.selection.reset()
        self.state.result = None
        self.state.error = None
        self.state.view = ViewState.SELECTING
        self._render_selection()

    # ── language ─────────────────────────────────────────────────────

    async def set_language(self, language: str) -> bool:
        """
        Swap display strings. Selection and view state are untouched; on the
        result screen the precomputed image of ``language`` is shown instead.
        Returns ``False`` when the translations could not be loaded.
        """
        try:
            translations = await self.backend.translate(language)
        except KioskError as exc:
            logger.error("Could not load translations for %s, keeping %s: %s",
                         language, self.state.language, exc)
            return False

        self.state.language = language
        self.state.translations = dict(translations)
        self.renderer.render_texts(self.state)

        if self.state.view is not ViewState.RESULT_SHOWN:
            self._render_selection()
            return True

        result = self.state.result
        try:
            image = await self.backend.fetch_result_asset(result, language)
        except AssetLoadFailure as exc:
            logger.warning("Result image for %s unavailable: %s", language, exc)
            self.renderer.show_error(self.state.text("error_generic"))
            return True

        # A return may have happened while the image loaded
        if self.state.view is ViewState.RESULT_SHOWN and self.state.result is result \
                and self.state.language == language:
            try:
                self.renderer.render_result(self.state, image)
            except Exception:
                logger.exception("Could not display the %s result image", language)
                self.renderer.show_error(self.state.text("error_generic"))
        return True
