from .text import render_node_text, render_snapshot_text, render_trace_text

__all__ = [
    "render_node_text",
    "render_snapshot_text",
    "render_trace_text",
]
