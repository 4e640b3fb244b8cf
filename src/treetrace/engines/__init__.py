"""Insertion engines and the name registry used by the trace recorder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..errors import UnknownEngineError
from ..nodes import Key, TreeNode
from . import avl, bst, rbtree

logger = logging.getLogger(__name__)

InsertFn = Callable[[Optional[TreeNode], Key], TreeNode]
CheckFn = Callable[[Any], None]

# balancing metadata a snapshot may carry
SNAPSHOT_FIELDS = frozenset({"height", "color"})


@dataclass(frozen=True)
class InsertionEngine:
    """
    A named ``insert(root, key) -> root`` function plus its validator.

    Attributes
    ----------
    name : str
        Registry key, also stamped on every snapshot.
    insert : callable
        Pure insertion; must accept ``None`` as the empty tree.
    check : callable | None
        Raises :class:`~treetrace.errors.InvariantError` when the tree
        rooted at its argument breaks the engine's balancing invariants.
    fields : tuple[str, ...]
        Balancing metadata copied into snapshots (``"height"``, ``"color"``).
    """

    name: str
    insert: InsertFn
    check: Optional[CheckFn] = None
    fields: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"InsertionEngine({self.name!r})"


_engines: dict[str, InsertionEngine] = {}


def _validate_engine(engine: InsertionEngine) -> InsertionEngine:
    if not isinstance(engine, InsertionEngine):
        raise TypeError("engine must be an InsertionEngine instance")
    if not isinstance(engine.name, str) or not engine.name:
        raise TypeError("engine name must be a non-empty string")
    if not callable(engine.insert):
        raise TypeError("engine.insert must be callable")
    if engine.check is not None and not callable(engine.check):
        raise TypeError("engine.check must be callable")
    unknown = set(engine.fields) - SNAPSHOT_FIELDS
    if unknown:
        raise ValueError(f"unsupported snapshot fields: {sorted(unknown)}")
    return engine


def register_engine(
    engine: InsertionEngine, *aliases: str, replace: bool = False
) -> InsertionEngine:
    engine = _validate_engine(engine)
    names = (engine.name, *aliases)
    if not replace:
        taken = [name for name in names if name in _engines]
        if taken:
            raise ValueError(f"insertion engine {taken[0]!r} is already registered")
    for name in names:
        _engines[name] = engine
    logger.info(
        "register_engine: %s aliases=%s fields=%s", engine.name, list(aliases), engine.fields
    )
    return engine


def get_engine(name: str) -> InsertionEngine:
    try:
        return _engines[name]
    except KeyError:
        raise UnknownEngineError(name, available_engines()) from None


def resolve_engine(engine: InsertionEngine | str) -> InsertionEngine:
    if isinstance(engine, str):
        return get_engine(engine)
    return _validate_engine(engine)


def available_engines() -> list[str]:
    return sorted(_engines)


AVL = InsertionEngine(name="avl", insert=avl.insert, check=avl.check_avl, fields=("height",))
RED_BLACK = InsertionEngine(
    name="red_black", insert=rbtree.insert, check=rbtree.check_red_black, fields=("color",)
)
BST = InsertionEngine(name="bst", insert=bst.insert)


def _register_builtin_engines() -> None:
    register_engine(AVL)
    register_engine(RED_BLACK, "rbtree")
    register_engine(BST)


_register_builtin_engines()

__all__ = [
    "AVL",
    "BST",
    "InsertionEngine",
    "RED_BLACK",
    "available_engines",
    "get_engine",
    "register_engine",
    "resolve_engine",
]
