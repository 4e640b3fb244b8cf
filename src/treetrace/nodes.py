from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

Key = Union[int, float]


class Color(str, Enum):
    RED = "red"
    BLACK = "black"

    def __str__(self) -> str:
        return self.value


RED = Color.RED
BLACK = Color.BLACK


@dataclass(eq=False)
class TreeNode:
    """
    One key of a binary search tree.

    A node owns its ``left`` and ``right`` subtrees. ``parent`` is a
    back-reference kept only for the Red-Black fixup walk; it is left out
    of ``repr`` so printing a node never follows the cycle.
    """

    value: Key
    left: Optional[TreeNode] = None
    right: Optional[TreeNode] = None
    parent: Optional[TreeNode] = field(default=None, repr=False)
    height: int = 1
    color: Color = Color.RED

    @property
    def is_red(self) -> bool:
        return self.color is Color.RED

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def node_height(node: Optional[TreeNode]) -> int:
    return node.height if node is not None else 0


def balance_factor(node: Optional[TreeNode]) -> int:
    if node is None:
        return 0
    return node_height(node.left) - node_height(node.right)


def update_height(node: TreeNode) -> None:
    node.height = 1 + max(node_height(node.left), node_height(node.right))
