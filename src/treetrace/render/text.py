from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..tracing.snapshot import Snapshot
    from ..tracing.trace import Trace

CURRENT_MARKER = "  ◀━━ INSERTED"


def _node_label(node: Any) -> str:
    label = str(node.value)
    color = getattr(node, "color", None)
    height = getattr(node, "height", None)
    if color is not None:
        return f"({label}) {color}"
    if height is not None:
        return f"({label}) h={height}"
    return f"({label})"


def render_node_text(
    node: Any,
    indent: int = 0,
    prefix: str = "",
    highlight_id: Optional[int] = None,
) -> str:
    pad = " " * indent
    if node is None:
        return f"{pad}{prefix}∅"

    marker = ""
    if highlight_id is not None and getattr(node, "node_id", None) == highlight_id:
        marker = CURRENT_MARKER
    lines = [f"{pad}{prefix}{_node_label(node)}{marker}"]
    if node.left is None and node.right is None:
        return "\n".join(lines)
    for name in ("left", "right"):
        lines.append(
            render_node_text(getattr(node, name), indent + 4, f"{name}: ", highlight_id)
        )
    return "\n".join(lines)


def render_snapshot_text(snapshot: Snapshot, indent: int = 0) -> str:
    return render_node_text(snapshot.root, indent, highlight_id=snapshot.inserted_id)


def render_trace_text(trace: Trace) -> str:
    bar = "═" * 60
    lines = [bar, f"{trace.engine}: {len(trace)} snapshots", bar]
    if not len(trace):
        lines.append("(empty)")
    for snap in trace:
        what = f"insert {snap.inserted_key!r}" if snap.inserted_key is not None else "(marker)"
        lines.append(f"S{snap.step}  {what}")
        lines.append(render_snapshot_text(snap, indent=6))
    return "\n".join(lines)
