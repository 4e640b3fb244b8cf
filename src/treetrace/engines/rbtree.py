"""
Red-Black insertion with recolor/rotate fixup.

Leaves are ``None`` and count as BLACK. The tree is passed around as its
root; rotations return the (possibly new) root so a rotation at the top
of the tree is visible to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InvariantError
from ..nodes import BLACK, RED, Key, TreeNode

logger = logging.getLogger(__name__)

__all__ = [
    "black_height",
    "check_red_black",
    "insert",
    "insert_fixup",
    "left_rotate",
    "right_rotate",
]


def _is_red(node: Optional[TreeNode]) -> bool:
    return node is not None and node.color is RED


# -- rotations ---------------------------------------------------------


def left_rotate(root: TreeNode, x: TreeNode) -> TreeNode:
    y = x.right
    x.right = y.left  # type: ignore
    if y.left is not None:  # type: ignore
        y.left.parent = x  # type: ignore
    y.parent = x.parent  # type: ignore
    if x.parent is None:
        root = y  # type: ignore
    elif x is x.parent.left:
        x.parent.left = y
    else:
        x.parent.right = y
    y.left = x  # type: ignore
    x.parent = y
    return root


def right_rotate(root: TreeNode, y: TreeNode) -> TreeNode:
    x = y.left
    y.left = x.right  # type: ignore
    if x.right is not None:  # type: ignore
        x.right.parent = y  # type: ignore
    x.parent = y.parent  # type: ignore
    if y.parent is None:
        root = x  # type: ignore
    elif y is y.parent.left:
        y.parent.left = x
    else:
        y.parent.right = x
    x.right = y  # type: ignore
    y.parent = x
    return root


# -- insert ------------------------------------------------------------


def insert(root: Optional[TreeNode], value: Key) -> TreeNode:
    """Insert *value* as a RED leaf, repair colors and return the new root."""
    z = TreeNode(value, color=RED)
    y: Optional[TreeNode] = None
    x = root
    while x is not None:
        y = x
        x = x.left if value < x.value else x.right
    z.parent = y
    if y is None:
        root = z
    elif value < y.value:
        y.left = z
    else:
        y.right = z
    return insert_fixup(root, z)  # type: ignore


def insert_fixup(root: TreeNode, z: TreeNode) -> TreeNode:
    while z.parent is not None and z.parent.color is RED:
        grandparent = z.parent.parent  # red parent is never the root
        if z.parent is grandparent.left:  # type: ignore
            uncle = grandparent.right  # type: ignore
            if _is_red(uncle):
                logger.debug("rbtree: recolor under %r", grandparent.value)  # type: ignore
                z.parent.color = BLACK
                uncle.color = BLACK  # type: ignore
                grandparent.color = RED  # type: ignore
                z = grandparent  # type: ignore
            else:
                if z is z.parent.right:
                    z = z.parent
                    root = left_rotate(root, z)
                logger.debug("rbtree: rotate right at %r", z.parent.parent.value)  # type: ignore
                z.parent.color = BLACK  # type: ignore
                z.parent.parent.color = RED  # type: ignore
                root = right_rotate(root, z.parent.parent)  # type: ignore
        else:
            uncle = grandparent.left  # type: ignore
            if _is_red(uncle):
                logger.debug("rbtree: recolor under %r", grandparent.value)  # type: ignore
                z.parent.color = BLACK
                uncle.color = BLACK  # type: ignore
                grandparent.color = RED  # type: ignore
                z = grandparent  # type: ignore
            else:
                if z is z.parent.left:
                    z = z.parent
                    root = right_rotate(root, z)
                logger.debug("rbtree: rotate left at %r", z.parent.parent.value)  # type: ignore
                z.parent.color = BLACK  # type: ignore
                z.parent.parent.color = RED  # type: ignore
                root = left_rotate(root, z.parent.parent)  # type: ignore
    root.color = BLACK
    return root


# -- validation --------------------------------------------------------


def _check(node, live: bool) -> int:
    """Return the black height below *node*, counting the nil leaf."""
    if node is None:
        return 1
    if node.color is RED and (_is_red(node.left) or _is_red(node.right)):
        raise InvariantError(
            f"Red-red violation at {node.value!r}",
            invariant="red_red",
            value=node.value,
        )
    if live:
        for child in (node.left, node.right):
            if child is not None and child.parent is not node:
                raise InvariantError(
                    f"broken parent link under {node.value!r}",
                    invariant="parent_link",
                    value=child.value,
                )
    lh = _check(node.left, live)
    rh = _check(node.right, live)
    if lh != rh:
        raise InvariantError(
            f"Black-height mismatch at {node.value!r}: {lh} vs {rh}",
            invariant="black_height",
            value=node.value,
        )
    return lh + (1 if node.color is BLACK else 0)


def check_red_black(root) -> None:
    """Raise :class:`InvariantError` unless all Red-Black properties hold.

    Works on live trees and on snapshots; parent links are only verified
    on live :class:`TreeNode` trees since snapshots carry none.
    """
    if root is None:
        return
    if root.color is not BLACK:
        raise InvariantError(
            f"root {root.value!r} is not black", invariant="black_root", value=root.value
        )
    live = isinstance(root, TreeNode)
    if live and root.parent is not None:
        raise InvariantError(
            f"root {root.value!r} has a parent", invariant="parent_link", value=root.value
        )
    _check(root, live)


def black_height(root) -> int:
    """BLACK nodes on the path from *root* to a nil leaf.

    *root* itself is not counted, the nil leaf is.
    """
    h = 0
    node = root
    while node is not None:
        node = node.left
        if node is None or node.color is BLACK:
            h += 1
    return h
