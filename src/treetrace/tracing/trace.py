"""
treetrace.tracing.trace — run an engine over a key sequence and keep every state.

Core pipeline::

    1. validate_keys(keys)             — reject bad input before any insert
    2. TraceRecorder(engine)           — owns the live tree
    3. recorder.record(key)            — insert, clone, diff, append
    4. recorder.finish() -> Trace      — frozen sequence of snapshots
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, overload

from ..config import RecordConfig
from ..engines import InsertionEngine, resolve_engine
from ..errors import EmptyTraceError
from ..keys import validate_key, validate_keys
from ..nodes import Key, TreeNode
from ..render.text import render_trace_text
from ..traversal import check_bst_order
from .snapshot import Snapshot, clone_without_parent_links, compute_transition

logger = logging.getLogger(__name__)

__all__ = ["Trace", "TraceRecorder", "build_trace"]


@dataclass(frozen=True)
class Trace:
    """
    Ordered snapshots, one per inserted key.

    Attributes
    ----------
    engine : str
        Name of the engine that built the tree.
    keys : tuple
        The inserted keys, in order.
    snapshots : tuple[Snapshot, ...]
        ``snapshots[i]`` is the tree right after inserting ``keys[i]``.
    """

    engine: str
    keys: tuple = ()
    snapshots: tuple[Snapshot, ...] = ()

    def __len__(self) -> int:
        return len(self.snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self.snapshots)

    @overload
    def __getitem__(self, index: int) -> Snapshot: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Snapshot, ...]: ...

    def __getitem__(self, index):
        return self.snapshots[index]

    @property
    def is_empty(self) -> bool:
        return not self.snapshots

    @property
    def final(self) -> Snapshot:
        if not self.snapshots:
            raise EmptyTraceError("trace has no snapshots", details={"engine": self.engine})
        return self.snapshots[-1]

    def dump(self) -> None:
        """Log every step as an indented text tree."""
        logger.info("\n%s", render_trace_text(self))

    def __repr__(self) -> str:
        return f"Trace({self.engine}, {len(self.snapshots)} snapshots)"


class TraceRecorder:
    """
    Feeds keys into one engine and captures a :class:`Snapshot` after each.

    The live tree never leaves this object; only frozen snapshots do.
    """

    def __init__(
        self, engine: InsertionEngine | str, config: Optional[RecordConfig] = None
    ):
        self.engine = resolve_engine(engine)
        self.config = config or RecordConfig()
        self._root: Optional[TreeNode] = None
        self._ids: dict[int, int] = {}
        self._keys: list[Key] = []
        self._snapshots: list[Snapshot] = []
        self._finished = False

    def record(self, key: Key) -> Snapshot:
        """Insert one key and append its snapshot."""
        if self._finished:
            raise RuntimeError("TraceRecorder already finished")
        key = validate_key(key, len(self._snapshots))
        engine = self.engine
        self._root = engine.insert(self._root, key)

        if self.config.check_invariants:
            check_bst_order(self._root)
            if engine.check is not None:
                engine.check(self._root)

        seen_before = len(self._ids)
        root = clone_without_parent_links(self._root, engine.fields, self._ids)
        # exactly one live node is new per insertion
        inserted_id = seen_before if len(self._ids) > seen_before else None

        prev_root = self._snapshots[-1].root if self._snapshots else None
        snap = Snapshot(
            step=len(self._snapshots),
            engine=engine.name,
            root=root,
            inserted_key=key,
            inserted_id=inserted_id,
            transition=compute_transition(prev_root, root),
        )
        self._keys.append(key)
        self._snapshots.append(snap)
        if self.config.log_steps:
            logger.debug("%r transition=%s", snap, snap.transition)
        return snap

    def finish(self) -> Trace:
        self._finished = True
        self._root = None
        self._ids = {}
        trace = Trace(
            engine=self.engine.name,
            keys=tuple(self._keys),
            snapshots=tuple(self._snapshots),
        )
        logger.info("TraceRecorder.finish: %r", trace)
        return trace

    def __repr__(self) -> str:
        state = "finished" if self._finished else "recording"
        return f"TraceRecorder({self.engine.name}, {len(self._snapshots)} snapshots, {state})"


def build_trace(
    keys: Iterable[Any],
    engine: InsertionEngine | str,
    config: Optional[RecordConfig] = None,
) -> Trace:
    """
    Insert *keys* in order with *engine*, one snapshot per key.

    Example::

        trace = build_trace([50, 30, 70], "avl")
        trace.final.root.value  # 50

    Parameters
    ----------
    keys : iterable of numbers
        Validated with :func:`~treetrace.keys.validate_keys` first.
    engine : InsertionEngine | str
        Engine object or registered name (``"avl"``, ``"red_black"``, ``"bst"``).
    config : RecordConfig | None
        Recording options.
    """
    valid = validate_keys(keys)
    recorder = TraceRecorder(engine, config)
    logger.info("build_trace: engine=%s keys=%d", recorder.engine.name, len(valid))
    for key in valid:
        recorder.record(key)
    return recorder.finish()
