"""
Iterative traversals shared by live trees and snapshots.

Everything here only reads ``value``, ``left`` and ``right``, so the same
functions work on :class:`~treetrace.nodes.TreeNode` and on
:class:`~treetrace.tracing.snapshot.SnapshotNode`.
"""

from __future__ import annotations

from typing import Any, Iterator

from .errors import InvariantError


def iter_inorder(root: Any) -> Iterator[Any]:
    stack: list[Any] = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right


def iter_preorder(root: Any) -> Iterator[Any]:
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def iter_postorder(root: Any) -> Iterator[Any]:
    out: list[Any] = []
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        out.append(node)
        if node.left is not None:
            stack.append(node.left)
        if node.right is not None:
            stack.append(node.right)
    return reversed(out)


def inorder(root: Any) -> list:
    return [n.value for n in iter_inorder(root)]


def preorder(root: Any) -> list:
    return [n.value for n in iter_preorder(root)]


def postorder(root: Any) -> list:
    return [n.value for n in iter_postorder(root)]


def tree_size(root: Any) -> int:
    return sum(1 for _ in iter_preorder(root))


def check_bst_order(root: Any) -> None:
    """Raise :class:`InvariantError` unless the in-order walk is non-decreasing.

    Duplicates are inserted to the right, but a later rotation may lift the
    right-hand copy above its twin, so equal keys can sit on either side.
    """
    prev = None
    for node in iter_inorder(root):
        if prev is not None and node.value < prev.value:
            raise InvariantError(
                f"BST order violated: {node.value!r} follows {prev.value!r}",
                invariant="bst_order",
                value=node.value,
            )
        prev = node
