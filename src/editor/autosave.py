r"""Debounced background saving for an EditSession.

State machine::

    idle --edit--> pending --timer--> saving --done--> idle
                      ^    \--edit (re-arm)                |
                      \---------- still dirty -------------/

Only the last edit of a burst triggers a write, and the write always
carries the latest working document.  Edits made while a save is in
flight stay in the session; when the save finishes a new debounce cycle
starts if the session is still dirty.  Published documents are never
autosaved.  A manual save or publish pauses the policy first; an autosave
that was superseded that way never overwrites the session's snapshot.

Timers go through a scheduler exposing asyncio's ``call_later``; by
default that is the running event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pagecraft.content.models import ContentDocument
from pagecraft.editor.session import EditSession
from pagecraft.errors import PersistenceError
from pagecraft.persistence.base import PersistenceAdapter, SaveMode

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.8


class AutosaveState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"


class UnloadGuard:
    """Registry of "unsaved changes" checks consulted before leaving a page.

    The UI host calls :meth:`should_warn` from its navigation hook (the
    browser's ``beforeunload`` in the admin app).
    """

    def __init__(self) -> None:
        self._checks: list[Callable[[], bool]] = []

    def register(self, check: Callable[[], bool]) -> None:
        self._checks.append(check)

    def unregister(self, check: Callable[[], bool]) -> None:
        if check in self._checks:
            self._checks.remove(check)

    def should_warn(self) -> bool:
        return any(check() for check in self._checks)

    def __len__(self) -> int:
        return len(self._checks)


class AutosavePolicy:
    """Watches a session and saves it after ``delay`` seconds of quiet."""

    def __init__(
        self,
        session: EditSession,
        adapter: PersistenceAdapter,
        *,
        delay: float = DEFAULT_DELAY,
        scheduler: Any = None,
        guard: UnloadGuard | None = None,
    ) -> None:
        self.session = session
        self.adapter = adapter
        self.delay = delay
        self.state = AutosaveState.IDLE
        self.last_error: PersistenceError | None = None
        self._scheduler = scheduler
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Future[None] | None = None
        self._guard = guard
        self._disposed = False
        self._paused = False
        self._generation = 0
        self._unsubscribe = session.subscribe(self._on_change)
        if guard is not None:
            guard.register(self.blocks_navigation)

    def blocks_navigation(self) -> bool:
        """True while leaving the page would lose edits."""
        return self.session.dirty

    def cancel(self) -> None:
        """Drop a pending timer.  An in-flight save is left to finish."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self.state == AutosaveState.PENDING:
            self.state = AutosaveState.IDLE

    async def drain(self) -> None:
        """Wait for an in-flight autosave, if any."""
        if self._task is not None and not self._task.done():
            await self._task

    async def pause(self) -> None:
        """Hand the session over to a manual save.

        Drops the pending timer and waits for an in-flight autosave.  No
        timer is armed until :meth:`resume`.
        """
        self._generation += 1
        self._paused = True
        self.cancel()
        await self.drain()

    def resume(self) -> None:
        """End a manual save; re-arms if the session is still dirty."""
        self._paused = False
        self._on_change(self.session)

    def dispose(self) -> None:
        """Stop watching the session and release the unload guard."""
        self.cancel()
        self._unsubscribe()
        if self._guard is not None:
            self._guard.unregister(self.blocks_navigation)
        self._disposed = True

    # ── Internals ────────────────────────────────────────────────

    def _on_change(self, session: EditSession) -> None:
        if self._disposed or self._paused or self.state == AutosaveState.SAVING:
            return
        if session.dirty and not session.document.is_published:
            self._arm()
        else:
            self.cancel()

    def _arm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(self.delay, self._fire)
        self.state = AutosaveState.PENDING
        logger.debug("Autosave armed for %s (%.2fs)", self.session.document.id, self.delay)

    def _fire(self) -> None:
        self._handle = None
        if self._disposed:
            return
        self.state = AutosaveState.SAVING
        self._task = asyncio.ensure_future(self._autosave())

    async def _autosave(self) -> None:
        generation = self._generation
        sent = self.session.document.model_copy(deep=True)
        try:
            await self.adapter.save(sent, SaveMode.AUTO)
        except PersistenceError as exc:
            self._failed(sent, exc)
            return
        except Exception as exc:
            logger.exception("Adapter raised an unexpected error during autosave")
            self._failed(sent, PersistenceError(f"Unexpected autosave error: {exc}"))
            return

        self.state = AutosaveState.IDLE
        self.last_error = None
        if generation != self._generation:
            logger.info("Discarding autosave result for %s: superseded by a manual save", sent.id)
        elif self._is_current(sent):
            # Re-arms through _on_change if edits arrived mid-save.
            self.session.mark_saved(sent)
        else:
            logger.info("Discarding autosave result for %s: editor moved on", sent.id)
            self._on_change(self.session)

    def _failed(self, sent: ContentDocument, exc: PersistenceError) -> None:
        self.state = AutosaveState.IDLE
        self.last_error = exc
        logger.warning("Autosave of %s failed: %s", sent.id, exc)

    def _is_current(self, sent: ContentDocument) -> bool:
        return not self._disposed and self.session.document.id == sent.id
