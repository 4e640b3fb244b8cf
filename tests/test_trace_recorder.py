import logging
import random

import numpy as np
import pytest

from treetrace import (
    AVL,
    RED_BLACK,
    EmptyTraceError,
    InsertionEngine,
    InvalidKeyError,
    InvariantError,
    RecordConfig,
    TraceRecorder,
    TreeNode,
    build_trace,
)
from treetrace.engines.avl import check_avl
from treetrace.engines.rbtree import check_red_black
from treetrace.nodes import BLACK, RED
from treetrace.traversal import check_bst_order, preorder


def test_avl_trace_of_balanced_sequence():
    keys = [50, 30, 70, 20, 40, 60, 80]
    trace = build_trace(keys, "avl")
    assert len(trace) == 7
    assert trace.engine == "avl"
    assert trace.keys == tuple(keys)
    assert [s.inserted_key for s in trace] == keys
    assert [s.step for s in trace] == list(range(7))
    final = trace.final.root
    assert final.value == 50
    assert final.height == 3
    assert preorder(final) == [50, 30, 20, 40, 70, 60, 80]


def test_avl_rotation_visible_between_steps():
    trace = build_trace([1, 2, 3], AVL)
    assert preorder(trace[1].root) == [1, 2]
    assert preorder(trace[2].root) == [2, 1, 3]
    t = trace[2].transition
    assert [c.key for c in t.added] == [3]
    assert sorted(t.reparented) == [1, 2]
    heights = {(c.key, c.old_value, c.new_value) for c in t.changes("height")}
    assert heights == {(1, 2, 1), (2, 1, 2)}


def test_red_black_trace_ends_with_black_root_and_red_children():
    trace = build_trace([10, 20, 30], "red_black")
    root = trace.final.root
    assert (root.value, root.color) == (20, BLACK)
    assert (root.left.value, root.left.color) == (10, RED)
    assert (root.right.value, root.right.color) == (30, RED)
    assert root.height is None


def test_red_black_every_step_is_valid():
    trace = build_trace([1, 2, 3, 4, 5, 6, 7], "rbtree")
    assert len(trace) == 7
    for snap in trace:
        check_red_black(snap.root)
        check_bst_order(snap.root)


def test_empty_input_gives_empty_trace():
    trace = build_trace([], "avl")
    assert len(trace) == 0
    assert trace.is_empty
    with pytest.raises(EmptyTraceError):
        trace.final


def test_inserted_id_matches_step():
    trace = build_trace([4, 2, 6, 1, 3, 5, 7, 4], "red_black")
    for snap in trace:
        assert snap.inserted_id == snap.step
        assert snap.inserted_node.value == snap.inserted_key
        assert [c.node_id for c in snap.transition.added] == [snap.step]


def test_snapshots_do_not_change_after_more_inserts():
    recorder = TraceRecorder("avl")
    first = recorder.record(10)
    second = recorder.record(20)
    for k in [30, 40, 50]:
        recorder.record(k)
    assert preorder(first.root) == [10]
    assert preorder(second.root) == [10, 20]
    trace = recorder.finish()
    assert trace[0] is first
    assert preorder(trace.final.root) == [20, 10, 40, 30, 50]


def test_recording_after_finish_fails():
    recorder = TraceRecorder(RED_BLACK)
    recorder.record(1)
    recorder.finish()
    with pytest.raises(RuntimeError, match="already finished"):
        recorder.record(2)


@pytest.mark.parametrize("engine", ["avl", "red_black", "bst"])
def test_build_trace_is_deterministic(engine):
    keys = [13, 8, 17, 1, 11, 15, 25, 6, 22, 27, 8, 15]
    a = build_trace(keys, engine)
    b = build_trace(keys, engine)
    assert a == b
    assert [s.to_dict() for s in a] == [s.to_dict() for s in b]


@pytest.mark.parametrize("engine,check", [("avl", check_avl), ("red_black", check_red_black)])
@pytest.mark.parametrize("seed", range(5))
def test_invariants_hold_at_every_step(engine, check, seed):
    rng = random.Random(seed)
    keys = [rng.randint(0, 60) for _ in range(80)]
    trace = build_trace(keys, engine, RecordConfig(check_invariants=True))
    assert len(trace) == len(keys)
    for i, snap in enumerate(trace):
        check(snap.root)
        assert snap.values() == sorted(keys[: i + 1])


def test_invalid_keys_rejected_before_any_insert():
    with pytest.raises(InvalidKeyError) as exc:
        build_trace([1, 2, "three"], "avl")
    assert exc.value.index == 2
    with pytest.raises(InvalidKeyError):
        build_trace([1.0, float("nan")], "avl")
    with pytest.raises(InvalidKeyError):
        build_trace([True], "red_black")
    with pytest.raises(InvalidKeyError):
        TraceRecorder("avl").record(None)


def test_numpy_keys_are_normalized():
    trace = build_trace(np.array([3, 1, 2]), "avl")
    assert trace.keys == (3, 1, 2)
    assert all(type(k) is int for k in trace.keys)


def test_check_invariants_catches_a_broken_engine():
    def push_down(root, value):
        return TreeNode(value, left=root)

    broken = InsertionEngine(name="broken", insert=push_down)
    build_trace([1, 0], broken)
    with pytest.raises(InvariantError, match="BST order"):
        build_trace([1, 0], broken, RecordConfig(check_invariants=True))


def test_dump_logs_every_step(caplog):
    trace = build_trace([2, 1, 3], "avl")
    with caplog.at_level(logging.INFO, logger="treetrace.tracing.trace"):
        trace.dump()
    text = caplog.text
    assert "avl: 3 snapshots" in text
    assert "S2  insert 3" in text
