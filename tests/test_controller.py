"""Unit tests for NavigationController (in-memory history, real Workspace)."""

from __future__ import annotations

import pytest

from shareview.core.errors import PayloadMissing, PushFailed, RegisterFailed, RestoreFailed
from shareview.core.types import HistoryEntryTag, Mode, NavigationState, StatusLevel
from shareview.history.memory import InMemoryHistory
from shareview.navigation.controller import NavigationController
from shareview.snapshot.snapshot_store import SnapshotStore
from shareview.snapshot.workspace import Workspace, encode_document
from shareview.ui.notifier import StatusBoard

SHARED_DOC = {"blocks": ["shared"]}
SHARED = encode_document(SHARED_DOC)
LINK = "https://app.test/editor?share=XJ9&lang=en#top"


def make_controller(url=LINK, absorb=True, **history_kwargs):
    history = InMemoryHistory(url, **history_kwargs)
    workspace = Workspace({"blocks": ["user"]})
    notifier = StatusBoard()
    controller = NavigationController(
        history,
        SnapshotStore(workspace),
        notifier=notifier,
        absorb_view_reentry=absorb,
    )
    return controller, history, workspace, notifier


async def open_shared(controller, workspace, payload=SHARED):
    """What the feature does on startup: apply the payload, then anchor the view."""
    workspace.import_snapshot(payload)
    assert await controller.register_shared_view(payload)


class TestRegisterSharedView:
    def setup_method(self):
        self.controller, self.history, self.workspace, self.notifier = make_controller()

    # ------------------------------------------------------------------ scenario A

    async def test_register_enters_view_mode(self):
        assert await self.controller.register_shared_view("XJ9") is True
        state = self.controller.state
        assert state.mode is Mode.VIEW
        assert state.tracking_active is True
        assert state.shared_payload == "XJ9"
        assert state.edit_entry_created is False

    async def test_register_replaces_current_entry(self):
        await self.controller.register_shared_view("XJ9")
        assert self.history.depth == 1
        assert self.history.current.tag is HistoryEntryTag.VIEW_ANCHOR
        assert self.history.current.url == "https://app.test/editor?share=XJ9"

    async def test_register_subscribes_to_history_events(self):
        await self.controller.register_shared_view("XJ9")
        assert self.history.has_navigate_subscriber
        assert self.history.has_resurrection_subscriber

    async def test_first_payload_wins(self):
        await self.controller.register_shared_view("XJ9")
        assert await self.controller.register_shared_view("OTHER") is False
        assert self.controller.shared_payload == "XJ9"
        assert await self.controller.register_shared_view("XJ9") is True

    # ------------------------------------------------------------------ scenario E / failures

    async def test_empty_payload_fails_and_stays_idle(self):
        assert await self.controller.register_shared_view("") is False
        assert self.controller.state == NavigationState()
        assert isinstance(self.controller.last_error, PayloadMissing)
        assert self.history.current.tag is None
        assert self.notifier.last.level is StatusLevel.ERROR

    async def test_replace_unsupported_fails_and_stays_idle(self):
        controller, history, _, notifier = make_controller(supports_replace=False)
        assert await controller.register_shared_view("XJ9") is False
        assert controller.state.is_idle
        assert isinstance(controller.last_error, RegisterFailed)
        assert not history.has_navigate_subscriber
        assert notifier.last.level is StatusLevel.ERROR


class TestBeginEditTransition:
    def setup_method(self):
        self.controller, self.history, self.workspace, self.notifier = make_controller()

    async def test_noop_without_shared_view(self):
        assert await self.controller.begin_edit_transition() is False
        assert self.history.depth == 1
        assert self.controller.state.is_idle
        assert self.controller.last_error is None

    # ------------------------------------------------------------------ scenario B

    async def test_pushes_edit_entry(self):
        await self.controller.register_shared_view("XJ9")
        assert await self.controller.begin_edit_transition() is True
        state = self.controller.state
        assert state.mode is Mode.EDIT
        assert state.edit_entry_created is True
        assert state.suppress_next_view_reentry is True
        assert self.history.depth == 2
        assert self.history.current.tag is HistoryEntryTag.EDIT_TRANSITION

    async def test_edit_url_strips_share_parameter_only(self):
        self.history = InMemoryHistory(LINK)
        controller = NavigationController(self.history, SnapshotStore(self.workspace))
        await controller.register_shared_view("XJ9")
        # the anchor URL dropped lang/fragment; put the full address back as the page would have it
        await self.history.replace_current_entry(HistoryEntryTag.VIEW_ANCHOR, LINK)
        await controller.begin_edit_transition()
        assert self.history.current.url == "/editor?lang=en#top"

    async def test_second_call_is_idempotent(self):
        await self.controller.register_shared_view("XJ9")
        await self.controller.begin_edit_transition()
        before = self.controller.state
        assert await self.controller.begin_edit_transition() is False
        assert self.history.depth == 2
        assert self.controller.state == before

    async def test_push_unsupported_resets(self):
        controller, history, _, notifier = make_controller(supports_push=False)
        await controller.register_shared_view("XJ9")
        assert await controller.begin_edit_transition() is False
        assert controller.state.is_idle
        assert isinstance(controller.last_error, PushFailed)
        assert notifier.last.level is StatusLevel.ERROR
        assert history.depth == 1

    async def test_absorb_disabled_does_not_arm_suppression(self):
        controller, _, _, _ = make_controller(absorb=False)
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        assert controller.state.suppress_next_view_reentry is False


class TestBackForwardNavigation:
    # ------------------------------------------------------------------ scenario C

    async def test_absorbed_view_reentry_issues_one_more_back_step(self):
        controller, history, workspace, _ = make_controller()
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        workspace.set("blocks", ["edited"])

        history.back()
        await history.drain()

        assert history.back_requests == 1
        assert controller.mode is Mode.EDIT
        assert controller.state.suppress_next_view_reentry is False
        assert workspace.get("blocks") == ["edited"]  # payload not restored

    async def test_forward_after_absorbed_back_is_an_echo(self):
        controller, history, _, notifier = make_controller()
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        history.back()
        await history.drain()
        shown = len(notifier.messages)

        history.forward()
        await history.drain()
        assert controller.mode is Mode.EDIT
        assert len(notifier.messages) == shown

    async def test_back_restores_view_and_captures_edits(self):
        controller, history, workspace, notifier = make_controller(absorb=False)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        workspace.set("blocks", ["edited"])

        history.back()
        await history.drain()

        assert controller.mode is Mode.VIEW
        assert workspace.get("blocks") == ["shared"]
        assert controller.state.edit_snapshot != ""
        assert controller.state.edit_entry_created is False
        assert history.back_requests == 0
        assert notifier.last.text == "Shared view reloaded"

    async def test_forward_restores_edits(self):
        controller, history, workspace, _ = make_controller(absorb=False)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        workspace.set("blocks", ["edited"])
        history.back()
        await history.drain()

        history.forward()
        await history.drain()

        assert controller.mode is Mode.EDIT
        assert workspace.get("blocks") == ["edited"]
        state = controller.state
        assert state.edit_snapshot == ""  # consumed
        assert state.edit_entry_created is True

    async def test_forward_rearms_suppression(self):
        controller, history, workspace, _ = make_controller(absorb=True)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        await controller.handle_back_forward_navigation(HistoryEntryTag.VIEW_ANCHOR)
        await controller.handle_back_forward_navigation(HistoryEntryTag.VIEW_ANCHOR)
        assert controller.mode is Mode.VIEW

        await controller.handle_back_forward_navigation(HistoryEntryTag.EDIT_TRANSITION)
        assert controller.state.suppress_next_view_reentry is True

    async def test_edit_can_restart_after_back(self):
        controller, history, workspace, _ = make_controller(absorb=False)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        history.back()
        await history.drain()

        assert await controller.begin_edit_transition() is True
        assert history.depth == 2  # forward entry replaced, not stacked
        assert controller.state.edit_snapshot == ""

    async def test_push_echo_is_ignored(self):
        controller, _, _, notifier = make_controller()
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        before = controller.state
        await controller.handle_back_forward_navigation(HistoryEntryTag.EDIT_TRANSITION)
        assert controller.state == before
        assert notifier.messages == []

    async def test_untagged_entry_is_ignored(self):
        controller, history, _, _ = make_controller()
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        before = controller.state
        await controller.handle_back_forward_navigation(None)
        assert controller.state == before
        assert history.back_requests == 0

    async def test_raw_tag_strings_are_accepted(self):
        controller, history, _, _ = make_controller()
        await controller.register_shared_view("XJ9")
        await controller.begin_edit_transition()
        await controller.handle_back_forward_navigation("ViewAnchor")
        assert history.back_requests == 1

    async def test_ignored_when_not_tracking(self):
        controller, history, _, _ = make_controller()
        await controller.handle_back_forward_navigation(HistoryEntryTag.VIEW_ANCHOR)
        assert history.back_requests == 0
        assert controller.state.is_idle

    # ------------------------------------------------------------------ restore failures

    async def test_view_restore_failure_resets(self):
        controller, history, workspace, notifier = make_controller(absorb=False)
        await controller.register_shared_view("not-a-document")
        await controller.begin_edit_transition()

        history.back()
        await history.drain()

        assert controller.state == NavigationState()
        assert isinstance(controller.last_error, RestoreFailed)
        assert notifier.last.level is StatusLevel.ERROR
        assert not history.has_navigate_subscriber

    async def test_edit_restore_failure_resets(self, monkeypatch):
        controller, history, workspace, _ = make_controller(absorb=False)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        history.back()
        await history.drain()

        monkeypatch.setattr(workspace, "import_snapshot", lambda snapshot: False)
        history.forward()
        await history.drain()

        assert controller.state.is_idle
        assert isinstance(controller.last_error, RestoreFailed)


class TestPageResurrection:
    # ------------------------------------------------------------------ scenario D / P4

    async def test_resurrection_forces_view_mode_from_edit(self):
        controller, history, workspace, notifier = make_controller()
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        workspace.set("blocks", ["stale"])

        history.suspend()
        history.resume(back_forward=True)
        await history.drain()

        state = controller.state
        assert state.mode is Mode.VIEW
        assert state.edit_snapshot == ""
        assert state.edit_entry_created is False
        assert workspace.get("blocks") == ["shared"]
        assert notifier.messages == []  # silent

    async def test_resurrection_does_not_capture_stale_edits(self):
        controller, _, workspace, _ = make_controller()
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        workspace.set("blocks", ["stale"])
        await controller.handle_page_resurrection(True)
        assert controller.state.edit_snapshot == ""

    async def test_resurrection_in_view_mode_stays_in_view(self):
        controller, _, workspace, _ = make_controller()
        await open_shared(controller, workspace)
        await controller.handle_page_resurrection(True)
        assert controller.mode is Mode.VIEW

    async def test_fresh_load_is_ignored(self):
        controller, _, workspace, _ = make_controller()
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        await controller.handle_page_resurrection(False)
        assert controller.mode is Mode.EDIT
        assert controller.state.edit_entry_created is True

    async def test_ignored_when_not_tracking(self):
        controller, _, _, _ = make_controller()
        await controller.handle_page_resurrection(True)
        assert controller.state.is_idle


class TestResetAndModeObservers:
    async def test_reset_returns_to_idle_and_unsubscribes(self):
        controller, history, workspace, _ = make_controller()
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        controller.reset()
        assert controller.state == NavigationState()
        assert not history.has_navigate_subscriber
        assert not history.has_resurrection_subscriber

    def test_reset_is_idempotent(self):
        controller, _, _, _ = make_controller()
        controller.reset()
        controller.reset()
        assert controller.state.is_idle

    async def test_mode_listener_sees_every_change(self):
        controller, history, workspace, _ = make_controller(absorb=False)
        seen = []
        controller.on_mode_change(seen.append)
        await open_shared(controller, workspace)
        await controller.begin_edit_transition()
        history.back()
        await history.drain()
        controller.reset()
        assert seen == [Mode.EDIT, Mode.VIEW, Mode.EDIT, Mode.VIEW, Mode.EDIT]

    async def test_unsubscribed_listener_is_not_called(self):
        controller, _, _, _ = make_controller()
        seen = []
        unsubscribe = controller.on_mode_change(seen.append)
        unsubscribe()
        await controller.register_shared_view("XJ9")
        assert seen == [Mode.EDIT]

    async def test_state_is_a_copy(self):
        controller, _, _, _ = make_controller()
        await controller.register_shared_view("XJ9")
        snapshot = controller.state
        snapshot.mode = Mode.EDIT
        assert controller.mode is Mode.VIEW

    @pytest.mark.parametrize("absorb", [True, False])
    async def test_exactly_one_mode_through_a_session(self, absorb):
        controller, history, workspace, _ = make_controller(absorb=absorb)
        modes = []
        await open_shared(controller, workspace)
        modes.append(controller.mode)
        await controller.begin_edit_transition()
        modes.append(controller.mode)
        for step in (history.back, history.forward, history.back):
            step()
            await history.drain()
            modes.append(controller.mode)
        history.resume(back_forward=True)
        await history.drain()
        modes.append(controller.mode)
        assert all(isinstance(m, Mode) for m in modes)
        assert modes[-1] is Mode.VIEW
