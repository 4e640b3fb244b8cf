"""
Example: Red-Black insertion of random sorted keys

Usage:
    python examples/rbtree_playback.py [seed]
"""

import json
import sys

import treetrace as tt
from treetrace.engines.rbtree import black_height, check_red_black


def replay_by_hand(trace: tt.Trace) -> None:
    # drive the controller with a virtual clock instead of an event loop
    sched = tt.ManualScheduler()
    ctrl = tt.PlaybackController(trace, scheduler=sched, config=tt.PlaybackConfig.preset("slow"))
    while ctrl.state is tt.PlaybackState.PLAYING:
        sched.run_next()
        snap = ctrl.current_snapshot
        print(f"t={sched.now}ms  {snap!r}  recolored={snap.transition.recolored}")


if __name__ == "__main__":
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 0
    keys = tt.random_keys(seed=seed)
    print("keys:", keys)

    trace = tt.build_trace(keys, "red_black")
    check_red_black(trace.final.root)
    print("black height:", black_height(trace.final.root))

    print(tt.render_trace_text(trace))
    replay_by_hand(trace)

    print(json.dumps(tt.snapshot_to_dict(trace.final), indent=2))
