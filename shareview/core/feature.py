"""ShareFeature — main orchestrator for opening, editing and exporting shared content."""

from __future__ import annotations

import logging
from typing import Callable

from shareview.core.errors import ShareViewError
from shareview.core.types import Mode, SharePayload, StatusLevel
from shareview.history.bridge import HistoryBridge
from shareview.navigation.controller import NavigationController
from shareview.navigation.mode import ModeListener
from shareview.navigation.urls import (
    DEFAULT_QUERY_KEY,
    build_clean_url,
    build_share_url,
    read_shared_payload,
)
from shareview.snapshot.snapshot_store import ContentSource, SnapshotStore
from shareview.ui.notifier import LogNotifier, Notifier
from shareview.ui.preferences import SharePreferences

logger = logging.getLogger(__name__)


class ShareFeature:
    """
    Sits between the page (history bridge) and the editable content.

    Usage:
        feature = ShareFeature(workspace, history)
        await feature.open_from_url(page_url)   # read-only if ?share= is present
        await feature.request_start_editing()   # may need confirm_import()
        payload = await feature.export_share_payload()
    """

    def __init__(
        self,
        content: ContentSource,
        history: HistoryBridge,
        *,
        notifier: Notifier | None = None,
        preferences: SharePreferences | None = None,
        query_key: str = DEFAULT_QUERY_KEY,
        absorb_view_reentry: bool = True,
    ) -> None:
        self.content = content
        self._history = history
        self._notifier = notifier or LogNotifier()
        self._preferences = preferences or SharePreferences()
        self._query_key = query_key
        self._snapshots = SnapshotStore(content)
        self._controller = NavigationController(
            history,
            self._snapshots,
            notifier=self._notifier,
            query_key=query_key,
            absorb_view_reentry=absorb_view_reentry,
        )

        self._pending_payload = ""
        self._prior_content = ""  # user's own content before the shared view replaced it
        self.confirmation_pending = False

        set_read_only = getattr(content, "set_read_only", None)
        if callable(set_read_only):
            self._controller.on_mode_change(lambda mode: set_read_only(mode is Mode.VIEW))

    @property
    def controller(self) -> NavigationController:
        return self._controller

    # ------------------------------------------------------------------
    # Opening a shared link
    # ------------------------------------------------------------------

    async def open_from_url(self, url: str) -> bool:
        """
        Apply the payload carried by ``url`` and show it read-only.

        Returns False when the link has no payload or it could not be applied;
        in the latter case the share parameter is removed from the address.
        """
        encoded = read_shared_payload(url, self._query_key)
        if not encoded:
            return False
        if self._controller.is_tracking:
            # first payload wins; _prior_content must keep the user's own document
            logger.debug("Shared view already open; ignoring %s", url)
            return False

        self._pending_payload = encoded
        self._prior_content = self._snapshots.capture()
        try:
            self._snapshots.restore(encoded)
        except ShareViewError as exc:
            logger.warning("Failed to read shared layout: %s", exc)
            self._notifier.show("Could not apply the shared content", StatusLevel.ERROR)
            self._pending_payload = ""
            self._prior_content = ""
            await self._cleanup_share_query()
            return False

        if not await self._controller.register_shared_view(encoded):
            # the controller has already reported and reset
            self._pending_payload = ""
            self._restore_prior_content()
            return False

        self._notifier.show("Opened the shared content read-only", StatusLevel.INFO)
        return True

    # ------------------------------------------------------------------
    # Switching to editing
    # ------------------------------------------------------------------

    async def request_start_editing(self) -> bool:
        """
        The user asked to edit the shared view.

        Starts editing at once when the user opted out of the confirmation;
        otherwise sets ``confirmation_pending`` and returns False.
        """
        if self._controller.mode is not Mode.VIEW:
            return False
        if self._preferences.should_skip_import_dialog():
            return await self.confirm_import()
        self.confirmation_pending = True
        return False

    async def confirm_import(self, *, skip_next_time: bool | None = None) -> bool:
        """
        Take the shared content into the editable workspace.

        Only acts while the shared view is showing; once editing has started
        the workspace holds the user's edits and is left alone.
        """
        if self._controller.mode is not Mode.VIEW or not self._controller.is_tracking:
            self.confirmation_pending = False
            return False
        if skip_next_time is not None:
            self._preferences.set_skip_import_dialog(skip_next_time)
        self.confirmation_pending = False

        payload = self._pending_payload or self._controller.shared_payload
        if not payload:
            return False

        try:
            self._snapshots.restore(payload)
        except ShareViewError as exc:
            logger.warning("Failed to read shared layout: %s", exc)
            self._notifier.show("Could not apply the shared content", StatusLevel.ERROR)
            return False

        self._notifier.show(
            "Editing the shared content. Use Back to return to the original.",
            StatusLevel.SUCCESS,
        )
        handled = await self._controller.begin_edit_transition()
        self._pending_payload = ""
        if not handled:
            # no history entry was recorded, so the share link must not stay in the address
            await self._cleanup_share_query()
        return True

    def cancel_import(self) -> None:
        """Close the confirmation; the shared view stays as it is."""
        if not self.confirmation_pending:
            return
        self.confirmation_pending = False
        self._notifier.show("Cancelled loading the shared content", StatusLevel.INFO)

    async def discard_shared_view(self) -> bool:
        """
        Leave the shared view and bring back the user's own content.

        Returns False if the previous content could not be restored; the
        shared view is closed either way.
        """
        if not self._controller.is_tracking:
            return False
        prior, self._prior_content = self._prior_content, ""
        self._pending_payload = ""
        self.confirmation_pending = False
        restored = True
        if prior:
            try:
                self._snapshots.restore(prior)
            except ShareViewError as exc:
                logger.error("Failed to restore previous workspace: %s", exc)
                self._notifier.show("Could not restore your previous content", StatusLevel.ERROR)
                restored = False
        await self._cleanup_share_query()
        if restored:
            self._notifier.show("Closed the shared content", StatusLevel.INFO)
        return restored

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    async def export_share_payload(self, base_url: str | None = None) -> SharePayload:
        """
        Encode the current content into a share link.

        Raises ShareViewError when the content can not be encoded.
        """
        encoded = self._snapshots.capture()
        if not encoded:
            raise ShareViewError("Could not encode the current content")
        base = base_url or await self._history.current_url()
        return SharePayload(
            encoded=encoded,
            url=build_share_url(base, encoded, self._query_key),
        )

    # ------------------------------------------------------------------
    # Public mode API
    # ------------------------------------------------------------------

    def is_share_view_mode(self) -> bool:
        return self._controller.mode is Mode.VIEW

    def on_share_view_mode_change(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        return self._controller.on_mode_change(lambda mode: listener(mode is Mode.VIEW))

    def on_mode_change(self, listener: ModeListener) -> Callable[[], None]:
        return self._controller.on_mode_change(listener)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _restore_prior_content(self) -> None:
        prior, self._prior_content = self._prior_content, ""
        if not prior:
            return
        try:
            self._snapshots.restore(prior)
        except ShareViewError as exc:
            logger.error("Failed to restore previous workspace: %s", exc)

    async def _cleanup_share_query(self) -> None:
        try:
            url = build_clean_url(await self._history.current_url())
            await self._history.replace_current_entry(None, url)
        except Exception as exc:
            logger.warning("Failed to remove share parameter from history: %s", exc)
        self._controller.reset()
