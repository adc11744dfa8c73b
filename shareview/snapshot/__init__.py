from shareview.snapshot.snapshot_store import ContentSource, SnapshotStore
from shareview.snapshot.workspace import Workspace, decode_document, encode_document

__all__ = [
    "ContentSource",
    "SnapshotStore",
    "Workspace",
    "decode_document",
    "encode_document",
]
