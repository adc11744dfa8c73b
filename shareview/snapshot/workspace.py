"""Workspace — a JSON document that can be shared through a URL."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import zlib
from pathlib import Path
from typing import Any

from shareview.core.errors import WorkspaceLocked
from shareview.snapshot.snapshot_store import ContentSource

logger = logging.getLogger(__name__)


def encode_document(document: dict[str, Any]) -> str:
    """Compact JSON, deflated, URL-safe base64 without padding."""
    raw = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    packed = zlib.compress(raw.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(packed).decode("ascii").rstrip("=")


def decode_document(text: str) -> dict[str, Any]:
    """
    Inverse of encode_document. Plain JSON objects are accepted too, so files
    saved by export_file() can be pasted back in.

    Raises ValueError on anything that is not an encoded JSON object.
    """
    stripped = text.strip()
    if stripped.startswith("{"):
        data = json.loads(stripped)
    else:
        padded = stripped + "=" * (-len(stripped) % 4)
        try:
            packed = base64.urlsafe_b64decode(padded.encode("ascii"))
            data = json.loads(zlib.decompress(packed).decode("utf-8"))
        except (binascii.Error, zlib.error, UnicodeError) as exc:
            raise ValueError(f"not an encoded document: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("document must be a JSON object")
    return data


class Workspace(ContentSource):
    """
    Editable document backed by a plain dict.

    Writes through set()/delete()/clear() are refused while read_only is set;
    import_snapshot() always applies, since restoring a shared view has to
    work on a locked workspace.
    """

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document: dict[str, Any] = dict(document or {})
        self.read_only = False

    @property
    def document(self) -> dict[str, Any]:
        return json.loads(json.dumps(self._document))

    def get(self, key: str, default: Any = None) -> Any:
        return self._document.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._check_writable()
        self._document[key] = value

    def delete(self, key: str) -> None:
        self._check_writable()
        self._document.pop(key, None)

    def clear(self) -> None:
        self._check_writable()
        self._document = {}

    def set_read_only(self, read_only: bool) -> None:
        self.read_only = read_only

    def _check_writable(self) -> None:
        if self.read_only:
            raise WorkspaceLocked()

    # ------------------------------------------------------------------
    # ContentSource
    # ------------------------------------------------------------------

    def export_snapshot(self) -> str:
        return encode_document(self._document)

    def import_snapshot(self, snapshot: str) -> bool:
        try:
            self._document = decode_document(snapshot)
        except ValueError as exc:
            logger.debug("Rejected snapshot: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> None:
        """Persist the encoded document (the auto-save slot)."""
        Path(path).write_text(self.export_snapshot(), encoding="utf-8")

    def load(self, path: str | Path) -> bool:
        """Load a previously saved document. Returns False if missing or unreadable."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError:
            return False
        if not self.import_snapshot(text):
            logger.warning("Saved workspace at %s could not be read", path)
            return False
        return True

    def export_file(self, path: str | Path) -> str:
        """Write a human-readable JSON copy and return its path."""
        dest = Path(path)
        dest.write_text(
            json.dumps(self._document, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        return str(dest.resolve())
