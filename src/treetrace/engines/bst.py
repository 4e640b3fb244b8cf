"""Plain, unbalanced BST insertion."""

from __future__ import annotations

from typing import Optional

from ..nodes import Key, TreeNode


def insert(root: Optional[TreeNode], value: Key) -> TreeNode:
    node = TreeNode(value)
    if root is None:
        return node
    cur = root
    while True:
        if value < cur.value:
            if cur.left is None:
                cur.left = node
                break
            cur = cur.left
        else:
            if cur.right is None:
                cur.right = node
                break
            cur = cur.right
    return root
