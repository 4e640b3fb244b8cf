"""Snapshots, transitions and the trace recorder."""

from .snapshot import (
    FieldChange,
    NodeChange,
    Snapshot,
    SnapshotNode,
    Transition,
    clone_without_parent_links,
    compute_transition,
    snapshot_to_dict,
)
from .trace import Trace, TraceRecorder, build_trace

__all__ = [
    "FieldChange",
    "NodeChange",
    "Snapshot",
    "SnapshotNode",
    "Trace",
    "TraceRecorder",
    "Transition",
    "build_trace",
    "clone_without_parent_links",
    "compute_transition",
    "snapshot_to_dict",
]
