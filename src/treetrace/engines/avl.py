"""
AVL insertion with rotation-based rebalancing.

Rotations are free functions that take the subtree root and return the
new one; the caller re-links the result. Only the two nodes whose
subtrees change get their height recomputed, ancestors are fixed up as
the insert recursion unwinds.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InvariantError
from ..nodes import Key, TreeNode, balance_factor, update_height

logger = logging.getLogger(__name__)

__all__ = ["check_avl", "insert", "rotate_left", "rotate_right"]


def rotate_right(y: TreeNode) -> TreeNode:
    x = y.left  # type: ignore
    t2 = x.right
    x.right = y
    y.left = t2
    update_height(y)
    update_height(x)
    return x


def rotate_left(x: TreeNode) -> TreeNode:
    y = x.right  # type: ignore
    t2 = y.left
    y.left = x
    x.right = t2
    update_height(x)
    update_height(y)
    return y


def insert(root: Optional[TreeNode], value: Key) -> TreeNode:
    """Insert *value* and return the new subtree root.

    Keys not less than a node go right. The old *root* may have been rotated
    away, so callers must keep the returned node.
    """
    if root is None:
        return TreeNode(value)
    if value < root.value:
        root.left = insert(root.left, value)
    else:
        root.right = insert(root.right, value)

    update_height(root)
    balance = balance_factor(root)

    if balance > 1:
        if value < root.left.value:  # type: ignore
            logger.debug("avl: left-left at %r", root.value)
            return rotate_right(root)
        # equal keys went into left.right
        logger.debug("avl: left-right at %r", root.value)
        root.left = rotate_left(root.left)  # type: ignore
        return rotate_right(root)

    if balance < -1:
        if value < root.right.value:  # type: ignore
            logger.debug("avl: right-left at %r", root.value)
            root.right = rotate_right(root.right)  # type: ignore
            return rotate_left(root)
        logger.debug("avl: right-right at %r", root.value)
        return rotate_left(root)

    return root


def _checked_height(node: Optional[TreeNode]) -> int:
    if node is None:
        return 0
    lh = _checked_height(node.left)
    rh = _checked_height(node.right)
    if abs(lh - rh) > 1:
        raise InvariantError(
            f"AVL balance violated at {node.value!r}: {lh} vs {rh}",
            invariant="avl_balance",
            value=node.value,
        )
    h = 1 + max(lh, rh)
    if node.height is not None and node.height != h:
        raise InvariantError(
            f"stale height at {node.value!r}: stored {node.height}, actual {h}",
            invariant="avl_height",
            value=node.value,
        )
    return h


def check_avl(root) -> None:
    """Raise :class:`InvariantError` if any node is out of balance or has a stale height."""
    _checked_height(root)