"""Shared types and dataclasses for shareview."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Mode(str, Enum):
    VIEW = "view"  # read-only shared view, editing surface locked
    EDIT = "edit"


class HistoryEntryTag(str, Enum):
    VIEW_ANCHOR = "ViewAnchor"
    EDIT_TRANSITION = "EditTransition"

    @classmethod
    def parse(cls, raw: object) -> HistoryEntryTag | None:
        """Map a raw history-state value to a tag; None for foreign entries."""
        if isinstance(raw, cls):
            return raw
        for tag in cls:
            if raw == tag.value:
                return tag
        return None


class StatusLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class NavigationState:
    """Everything the navigation controller knows about the current page."""

    mode: Mode = Mode.EDIT
    shared_payload: str = ""
    edit_snapshot: str = ""
    tracking_active: bool = False  # a ViewAnchor entry is registered
    edit_entry_created: bool = False  # an EditTransition entry is reachable
    suppress_next_view_reentry: bool = False

    @property
    def is_idle(self) -> bool:
        return self == NavigationState()

    def copy(self) -> NavigationState:
        return replace(self)


@dataclass(frozen=True)
class SharePayload:
    """Encoded content plus the link that opens it in shared view."""

    encoded: str
    url: str
