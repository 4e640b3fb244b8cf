"""
Example: AVL insertion replayed on a timer

Usage:
    python examples/avl_playback.py
"""

import asyncio
import logging

import treetrace as tt
from treetrace.engines.avl import check_avl


async def play(trace: tt.Trace, speed: str = "fast") -> None:
    done = asyncio.Event()

    def show(ctrl: tt.PlaybackController) -> None:
        snap = ctrl.current_snapshot
        print(f"[{ctrl.current_index + 1}/{len(trace)}] {ctrl.state.value}")
        print(tt.render_snapshot_text(snap, indent=2))
        if ctrl.state is tt.PlaybackState.COMPLETED:
            done.set()

    ctrl = tt.PlaybackController(config=tt.PlaybackConfig.preset(speed))
    ctrl.subscribe(show)
    ctrl.load(trace)
    await done.wait()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    keys = [50, 30, 70, 20, 40, 60, 80, 10, 5]
    trace = tt.build_trace(keys, "avl", tt.RecordConfig(check_invariants=True))
    check_avl(trace.final.root)
    assert trace.final.values() == sorted(keys)

    for snap in trace:
        t = snap.transition
        if t.reparented:
            print(f"step {snap.step}: rotation moved {t.reparented}")

    asyncio.run(play(trace))
