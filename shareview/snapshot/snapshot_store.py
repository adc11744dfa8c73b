"""Snapshot store — capture and restore editable content as one string."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from shareview.core.errors import PayloadMissing, RestoreFailed

logger = logging.getLogger(__name__)


class ContentSource(ABC):
    """Whatever owns the editable content (a workspace, an editor buffer, ...)."""

    @abstractmethod
    def export_snapshot(self) -> str:
        """Serialized form of the current content; may be empty."""

    @abstractmethod
    def import_snapshot(self, snapshot: str) -> bool:
        """Replace the current content. Returns False on malformed input."""


class SnapshotStore:
    """
    Stateless adapter between the navigation controller and a ContentSource.

    capture() is best-effort and never raises, so a failing export can not
    block a navigation transition. restore() raises, because a payload that
    can not be applied must abort the transition.
    """

    def __init__(self, source: ContentSource | None) -> None:
        self._source = source

    @property
    def available(self) -> bool:
        return self._source is not None

    def capture(self) -> str:
        if self._source is None:
            return ""
        try:
            return self._source.export_snapshot() or ""
        except Exception as exc:
            logger.warning("Failed to export editing snapshot: %s", exc)
            return ""

    def restore(self, snapshot: str) -> None:
        if not snapshot:
            raise PayloadMissing()
        if self._source is None:
            raise RestoreFailed("Content is not ready")
        try:
            applied = self._source.import_snapshot(snapshot)
        except Exception as exc:
            raise RestoreFailed() from exc
        if not applied:
            raise RestoreFailed()
