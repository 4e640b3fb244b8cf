__version__ = "0.1.0"

from .config import SPEED_PRESETS, PlaybackConfig, RecordConfig
from .engines import (
    AVL,
    BST,
    RED_BLACK,
    InsertionEngine,
    available_engines,
    get_engine,
    register_engine,
)
from .errors import (
    EmptyTraceError,
    InvalidKeyError,
    InvariantError,
    TreeTraceError,
    UnknownEngineError,
)
from .keys import random_keys, validate_keys
from .nodes import BLACK, RED, Color, TreeNode
from .playback import (
    AsyncioScheduler,
    ManualScheduler,
    PlaybackController,
    PlaybackState,
)
from .render import render_snapshot_text, render_trace_text
from .tracing import (
    FieldChange,
    NodeChange,
    Snapshot,
    SnapshotNode,
    Trace,
    TraceRecorder,
    Transition,
    build_trace,
    clone_without_parent_links,
    compute_transition,
    snapshot_to_dict,
)
from .traversal import check_bst_order, inorder, postorder, preorder, tree_size

__all__ = [
    "AVL",
    "AsyncioScheduler",
    "BLACK",
    "BST",
    "Color",
    "EmptyTraceError",
    "FieldChange",
    "InsertionEngine",
    "InvalidKeyError",
    "InvariantError",
    "ManualScheduler",
    "NodeChange",
    "PlaybackConfig",
    "PlaybackController",
    "PlaybackState",
    "RED",
    "RED_BLACK",
    "RecordConfig",
    "SPEED_PRESETS",
    "Snapshot",
    "SnapshotNode",
    "Trace",
    "TraceRecorder",
    "Transition",
    "TreeNode",
    "TreeTraceError",
    "UnknownEngineError",
    "available_engines",
    "build_trace",
    "check_bst_order",
    "clone_without_parent_links",
    "compute_transition",
    "get_engine",
    "inorder",
    "postorder",
    "preorder",
    "random_keys",
    "register_engine",
    "render_snapshot_text",
    "render_trace_text",
    "snapshot_to_dict",
    "tree_size",
    "validate_keys",
]
