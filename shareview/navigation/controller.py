"""NavigationController — keeps the view/edit mode in step with browser history."""

from __future__ import annotations

import logging
from typing import Callable

from shareview.core.errors import (
    PayloadMissing,
    PushFailed,
    RegisterFailed,
    RestoreFailed,
    ShareViewError,
)
from shareview.core.types import HistoryEntryTag, Mode, NavigationState, StatusLevel
from shareview.history.bridge import HistoryBridge
from shareview.navigation.mode import ModeListener, ModeSignal
from shareview.navigation.urls import DEFAULT_QUERY_KEY, build_edit_url, build_share_url
from shareview.snapshot.snapshot_store import SnapshotStore
from shareview.ui.notifier import LogNotifier, Notifier

logger = logging.getLogger(__name__)


class NavigationController:
    """
    State machine for a shared link that can be turned into an editing session.

        Idle --register_shared_view--> ViewAnchored --begin_edit_transition--> EditTransitioned
                                            ^                                       |
                                            +-------------- back / forward ---------+

    History layout after editing starts::

        [ ViewAnchor  ?share=<payload> ]   <- replaced, the page's own entry
        [ EditTransition  (no share)   ]   <- pushed

    Going back to the ViewAnchor reloads the shared payload (after capturing
    the edits); going forward onto the EditTransition restores the captured
    edits. A page resurrected from the back/forward cache always comes back
    in view mode.

    With ``absorb_view_reentry`` enabled (the default), the first back step
    that lands on the ViewAnchor after an edit transition is consumed by one
    more programmatic back step instead of re-showing the view.

    Every failure resets the controller to Idle and is reported once through
    the notifier; nothing is raised to the caller.
    """

    def __init__(
        self,
        history: HistoryBridge,
        snapshots: SnapshotStore,
        *,
        notifier: Notifier | None = None,
        query_key: str = DEFAULT_QUERY_KEY,
        absorb_view_reentry: bool = True,
    ) -> None:
        self._history = history
        self._snapshots = snapshots
        self._notifier = notifier or LogNotifier()
        self._query_key = query_key
        self._absorb_view_reentry = absorb_view_reentry

        self._state = NavigationState()
        self._mode = ModeSignal(self._state.mode)
        self._subscribed = False
        self.last_error: ShareViewError | None = None

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def state(self) -> NavigationState:
        """A copy; the controller is the only writer."""
        return self._state.copy()

    @property
    def is_tracking(self) -> bool:
        return self._state.tracking_active

    @property
    def shared_payload(self) -> str:
        return self._state.shared_payload

    def on_mode_change(self, listener: ModeListener) -> Callable[[], None]:
        """Call ``listener`` now and on every mode change. Returns an unsubscribe function."""
        return self._mode.subscribe(listener)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def register_shared_view(self, payload: str) -> bool:
        """Anchor the current history entry to ``payload`` and enter view mode."""
        if self._state.tracking_active:
            # first payload wins
            logger.debug("Shared view already registered; ignoring new payload")
            return payload == self._state.shared_payload

        if not payload:
            self._fail(PayloadMissing("The shared link carries no content"))
            return False

        try:
            url = build_share_url(
                await self._history.current_url(), payload, self._query_key
            )
            await self._history.replace_current_entry(HistoryEntryTag.VIEW_ANCHOR, url)
        except Exception as exc:
            self._fail(RegisterFailed(), exc)
            return False

        self._state.shared_payload = payload
        self._state.edit_snapshot = ""
        self._state.tracking_active = True
        self._state.edit_entry_created = False
        self._state.suppress_next_view_reentry = False
        self._set_mode(Mode.VIEW)
        self._subscribe()
        logger.debug("Shared view registered at %s", url)
        return True

    async def begin_edit_transition(self) -> bool:
        """
        Record the switch to editing as a new history entry.

        Returns False without side effects when there is no shared view or
        the edit entry already exists.
        """
        if not self._state.tracking_active or self._state.edit_entry_created:
            return False

        try:
            url = build_edit_url(await self._history.current_url(), self._query_key)
            await self._history.push_entry(HistoryEntryTag.EDIT_TRANSITION, url)
        except Exception as exc:
            self._fail(PushFailed(), exc)
            return False

        self._state.edit_entry_created = True
        self._state.edit_snapshot = ""  # any older snapshot belonged to the discarded forward entry
        self._state.suppress_next_view_reentry = self._absorb_view_reentry
        self._set_mode(Mode.EDIT)
        logger.debug("Edit transition pushed at %s", url)
        return True

    async def handle_back_forward_navigation(self, tag: HistoryEntryTag | None) -> None:
        """React to the entry that became current after a back/forward step."""
        if not self._state.tracking_active:
            return

        tag = HistoryEntryTag.parse(tag)
        if tag is HistoryEntryTag.VIEW_ANCHOR:
            if self._state.suppress_next_view_reentry:
                self._state.suppress_next_view_reentry = False
                logger.debug("Absorbing view re-entry with one more back step")
                try:
                    await self._history.go_back()
                    return
                except Exception as exc:
                    logger.warning("Programmatic back step failed: %s", exc)
            self._restore_view()
        elif tag is HistoryEntryTag.EDIT_TRANSITION:
            if self._state.mode is Mode.EDIT and self._state.edit_entry_created:
                # echo of our own push
                return
            self._restore_editing()

    async def handle_page_resurrection(self, was_back_forward: bool) -> None:
        """Force view mode when the page comes back from the back/forward cache."""
        if not self._state.tracking_active or not was_back_forward:
            return
        logger.debug("Page resurrected via back/forward; returning to shared view")
        self._state.edit_entry_created = False
        self._state.edit_snapshot = ""
        self._restore_view(silent=True, capture=False)

    def reset(self) -> None:
        """Drop all tracking and return to Idle (editable). Safe to call at any time."""
        if self._subscribed:
            self._history.unsubscribe_navigate()
            self._history.unsubscribe_resurrection()
            self._subscribed = False
        self._state = NavigationState()
        self._mode.set(self._state.mode)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _restore_view(self, *, silent: bool = False, capture: bool = True) -> None:
        if capture and self._state.mode is Mode.EDIT:
            snapshot = self._snapshots.capture()
            if snapshot:
                self._state.edit_snapshot = snapshot

        try:
            self._snapshots.restore(self._state.shared_payload)
        except RestoreFailed as exc:
            self._fail(RestoreFailed("Could not restore the shared view"), exc)
            return
        except ShareViewError as exc:
            self._fail(exc)
            return

        self._state.edit_entry_created = False
        self._set_mode(Mode.VIEW)
        if not silent:
            self._notifier.show("Shared view reloaded", StatusLevel.INFO)

    def _restore_editing(self) -> None:
        snapshot = self._state.edit_snapshot
        if snapshot:
            self._state.edit_snapshot = ""
            try:
                self._snapshots.restore(snapshot)
            except ShareViewError as exc:
                self._fail(RestoreFailed("Could not restore your edits"), exc)
                return

        self._state.edit_entry_created = True
        self._state.suppress_next_view_reentry = self._absorb_view_reentry
        self._set_mode(Mode.EDIT)
        self._notifier.show("Returned to the editing view", StatusLevel.INFO)

    def _set_mode(self, mode: Mode) -> None:
        self._state.mode = mode
        self._mode.set(mode)

    def _subscribe(self) -> None:
        if self._subscribed:
            return
        self._history.subscribe_navigate(self.handle_back_forward_navigation)
        self._history.subscribe_resurrection(self.handle_page_resurrection)
        self._subscribed = True

    def _fail(self, error: ShareViewError, cause: Exception | None = None) -> None:
        if cause is not None:
            logger.warning("%s: %s", error.message, cause)
        else:
            logger.warning("%s", error.message)
        self.last_error = error
        self._notifier.show(error.message, StatusLevel.ERROR)
        self.reset()
