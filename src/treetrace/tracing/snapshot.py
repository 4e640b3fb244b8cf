"""
treetrace.tracing.snapshot — immutable copies of a tree between insertions.

A live tree is mutated in place by the engines and carries parent
back-references. A snapshot is a frozen copy with no parent links and no
sharing with the live nodes, so nothing the engines do afterwards can
reach it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from ..nodes import Color, Key
from ..traversal import inorder, iter_postorder, iter_preorder

__all__ = [
    "FieldChange",
    "NodeChange",
    "Snapshot",
    "SnapshotNode",
    "Transition",
    "clone_without_parent_links",
    "compute_transition",
    "snapshot_to_dict",
]

TRACKED_FIELDS = ("color", "height", "parent")


@dataclass(frozen=True, eq=False)
class SnapshotNode:
    """One node of a snapshot. ``height``/``color`` are ``None`` when the engine keeps neither.

    Equality and hashing cover the whole subtree and are computed iteratively.
    """

    node_id: int
    value: Key
    left: Optional[SnapshotNode] = None
    right: Optional[SnapshotNode] = None
    height: Optional[int] = None
    color: Optional[Color] = None

    def _shape(self) -> tuple:
        return tuple(
            (
                n.node_id,
                n.value,
                n.height,
                n.color,
                n.left.node_id if n.left is not None else None,
                n.right.node_id if n.right is not None else None,
            )
            for n in iter_preorder(self)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapshotNode):
            return NotImplemented
        return self is other or self._shape() == other._shape()

    def __hash__(self) -> int:
        return hash(self._shape())

    def __repr__(self) -> str:
        meta = ""
        if self.color is not None:
            meta = f", {self.color}"
        elif self.height is not None:
            meta = f", h={self.height}"
        return f"SnapshotNode({self.value!r}#{self.node_id}{meta})"


def clone_without_parent_links(
    root: Any,
    fields: Iterable[str] = ("height", "color"),
    ids: Optional[dict[int, int]] = None,
) -> Optional[SnapshotNode]:
    """
    Deep-copy the tree at *root* into frozen :class:`SnapshotNode` objects.

    Parameters
    ----------
    root : TreeNode | None
        Live tree to copy. Parent pointers are never read.
    fields : iterable of str
        Balancing metadata to keep; anything else is stored as ``None``.
    ids : dict[int, int] | None
        ``id(live node) -> node_id`` table shared across the snapshots of
        one trace. Nodes seen for the first time get the next free number,
        so a node keeps its id through rotations.
    """
    if root is None:
        return None
    if ids is None:
        ids = {}
    keep = frozenset(fields)
    for node in iter_preorder(root):
        ids.setdefault(id(node), len(ids))
    built: dict[int, SnapshotNode] = {}
    # children are always built before their parent
    for node in iter_postorder(root):
        oid = id(node)
        built[oid] = SnapshotNode(
            node_id=ids[oid],
            value=node.value,
            left=built[id(node.left)] if node.left is not None else None,
            right=built[id(node.right)] if node.right is not None else None,
            height=node.height if "height" in keep else None,
            color=node.color if "color" in keep else None,
        )
    return built[id(root)]


# ---------------------------------------------------------------------------
# Transition: what changed between two consecutive snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeChange:
    """A node that appeared."""

    node_id: int
    key: Any = None

    def __repr__(self) -> str:
        return f"Node(key={self.key}, id={self.node_id})"


@dataclass(frozen=True)
class FieldChange:
    """A change of ``color``, ``height`` or ``parent`` (a node id) on a persisted node."""

    node_id: int
    field: str
    old_value: Any = None
    new_value: Any = None
    key: Any = None

    def __repr__(self) -> str:
        return f"Node(key={self.key}).{self.field}: {self.old_value!r} -> {self.new_value!r}"


@dataclass(frozen=True)
class Transition:
    """Diff between two consecutive snapshots.

    Attributes
    ----------
    added : tuple[NodeChange, ...]
        Nodes that appeared since the previous snapshot.
    modified : tuple[FieldChange, ...]
        Per-field changes on nodes present in both snapshots.
    """

    added: tuple[NodeChange, ...] = ()
    modified: tuple[FieldChange, ...] = ()

    def changes(self, field: str) -> list[FieldChange]:
        return [c for c in self.modified if c.field == field]

    @property
    def recolored(self) -> list[Any]:
        return [c.key for c in self.changes("color")]

    @property
    def reparented(self) -> list[Any]:
        """Keys of nodes moved under a new parent, i.e. touched by a rotation."""
        return [c.key for c in self.changes("parent")]

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.modified


def _index_nodes(root: Optional[SnapshotNode]) -> dict[int, tuple[SnapshotNode, Optional[int]]]:
    """``node_id -> (node, parent node_id)`` for every node under *root*."""
    out: dict[int, tuple[SnapshotNode, Optional[int]]] = {}
    stack: list[tuple[SnapshotNode, Optional[int]]] = [(root, None)] if root is not None else []
    while stack:
        node, parent_id = stack.pop()
        out[node.node_id] = (node, parent_id)
        for child in (node.left, node.right):
            if child is not None:
                stack.append((child, node.node_id))
    return out


def compute_transition(
    old_root: Optional[SnapshotNode], new_root: Optional[SnapshotNode]
) -> Transition:
    """Compute the structural and metadata diff between two snapshot trees."""
    old_nodes = _index_nodes(old_root)
    new_nodes = _index_nodes(new_root)

    added = tuple(
        NodeChange(node_id=nid, key=new_nodes[nid][0].value)
        for nid in sorted(set(new_nodes) - set(old_nodes))
    )

    modified: list[FieldChange] = []
    for nid in sorted(set(old_nodes) & set(new_nodes)):
        old_n, old_parent = old_nodes[nid]
        new_n, new_parent = new_nodes[nid]
        before = {"color": old_n.color, "height": old_n.height, "parent": old_parent}
        after = {"color": new_n.color, "height": new_n.height, "parent": new_parent}
        for field in TRACKED_FIELDS:
            if before[field] != after[field]:
                modified.append(
                    FieldChange(
                        node_id=nid,
                        field=field,
                        old_value=before[field],
                        new_value=after[field],
                        key=new_n.value,
                    )
                )
    return Transition(added=added, modified=tuple(modified))


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Snapshot:
    """
    The tree right after one insertion.

    Attributes
    ----------
    step : int
        0-based position in the trace.
    engine : str
        Name of the engine that produced the tree.
    root : SnapshotNode | None
        Frozen copy of the tree.
    inserted_key : Key | None
        The key just inserted, ``None`` for a marker snapshot.
    inserted_id : int | None
        ``node_id`` of the node created for *inserted_key*.
    transition : Transition | None
        What changed from the previous snapshot.
    """

    step: int
    engine: str
    root: Optional[SnapshotNode]
    inserted_key: Optional[Key] = None
    inserted_id: Optional[int] = None
    transition: Optional[Transition] = None

    def nodes(self) -> Iterator[SnapshotNode]:
        return iter_preorder(self.root)

    def find(self, node_id: int) -> Optional[SnapshotNode]:
        return next((n for n in self.nodes() if n.node_id == node_id), None)

    @property
    def inserted_node(self) -> Optional[SnapshotNode]:
        if self.inserted_id is None:
            return None
        return self.find(self.inserted_id)

    @property
    def size(self) -> int:
        return sum(1 for _ in self.nodes())

    def values(self) -> list:
        return inorder(self.root)

    def to_dict(self) -> dict[str, Any]:
        return snapshot_to_dict(self)

    def __repr__(self) -> str:
        what = f"insert {self.inserted_key!r}" if self.inserted_key is not None else "(marker)"
        return f"Snapshot#{self.step} {what} [{self.engine}, {self.size} nodes]"


def _node_to_dict(root: Optional[SnapshotNode]) -> Optional[dict[str, Any]]:
    if root is None:
        return None
    built: dict[int, dict[str, Any]] = {}
    for node in iter_postorder(root):
        d: dict[str, Any] = {"id": node.node_id, "value": node.value}
        if node.height is not None:
            d["height"] = node.height
        if node.color is not None:
            d["color"] = node.color.value
        d["left"] = built[node.left.node_id] if node.left is not None else None
        d["right"] = built[node.right.node_id] if node.right is not None else None
        built[node.node_id] = d
    return built[root.node_id]


def _value_for_dict(val: Any) -> Any:
    return val.value if isinstance(val, Color) else val


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Plain nested dicts/lists for renderers; contains no parent references."""
    out: dict[str, Any] = {
        "step": snapshot.step,
        "engine": snapshot.engine,
        "inserted_key": snapshot.inserted_key,
        "inserted_id": snapshot.inserted_id,
        "root": _node_to_dict(snapshot.root),
        "transition": None,
    }
    t = snapshot.transition
    if t is not None:
        out["transition"] = {
            "added": [{"id": c.node_id, "key": c.key} for c in t.added],
            "modified": [
                {
                    "id": c.node_id,
                    "key": c.key,
                    "field": c.field,
                    "old": _value_for_dict(c.old_value),
                    "new": _value_for_dict(c.new_value),
                }
                for c in t.modified
            ],
        }
    return out
