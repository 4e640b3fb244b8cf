"""
Timer-driven replay of a finished :class:`~treetrace.tracing.trace.Trace`.

States::

    IDLE ──load(non-empty)──▶ PLAYING ◀──resume── PAUSED
                               │  └────pause────────▲
                               ▼
                           COMPLETED   (index == last; restart() or load() leaves it)

Every scheduled tick carries a token. Loading, restarting, pausing or
re-pacing replaces the token, so a tick that was already queued for an
older schedule returns without touching the index.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from ..config import PlaybackConfig, validate_delay
from ..tracing.snapshot import Snapshot
from ..tracing.trace import Trace
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

__all__ = ["PlaybackController", "PlaybackState"]


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


Listener = Callable[["PlaybackController"], None]


class PlaybackController:
    """
    Steps through a trace on a timer, with pause / resume / restart.

    Parameters
    ----------
    trace : Trace | None
        Trace to play; ``None`` or an empty trace leaves the controller idle.
    scheduler : Scheduler | None
        Timer source. Defaults to :class:`AsyncioScheduler`, which needs a
        running event loop once playback starts.
    config : PlaybackConfig | None
        Initial delay and autoplay flag.
    delay_ms : int | None
        Overrides ``config.delay_ms``.
    """

    def __init__(
        self,
        trace: Optional[Trace] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        config: Optional[PlaybackConfig] = None,
        delay_ms: Optional[int] = None,
    ):
        self.config = config or PlaybackConfig()
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._delay_ms = validate_delay(
            delay_ms if delay_ms is not None else self.config.delay_ms
        )
        self._trace: Optional[Trace] = None
        self._index = 0
        self._state = PlaybackState.IDLE
        self._timer: Optional[TimerHandle] = None
        self._generation = 0
        self._listeners: list[Listener] = []
        if trace is not None:
            self.load(trace)

    # ---- read-only views -------------------------------------------------

    @property
    def trace(self) -> Optional[Trace]:
        return self._trace

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def last_index(self) -> int:
        return len(self._trace) - 1 if self._trace else -1

    @property
    def current_snapshot(self) -> Optional[Snapshot]:
        if not self._trace:
            return None
        return self._trace[self._index]

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    # ---- listeners -------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Call *listener(controller)* after every index change, load and restart."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ---- timer plumbing --------------------------------------------------

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self) -> None:
        self._cancel_timer()
        token = self._generation
        self._timer = self.scheduler.call_later(
            self._delay_ms, lambda: self._on_tick(token)
        )

    def _on_tick(self, token: int) -> None:
        if token != self._generation:
            logger.debug("PlaybackController: dropped stale tick %d", token)
            return
        self._timer = None
        if self._state is not PlaybackState.PLAYING:
            return
        self.step()
        if self._state is PlaybackState.PLAYING:
            self._schedule()

    def _start_from_zero(self) -> None:
        self._index = 0
        if len(self._trace) == 1:  # type: ignore[arg-type]
            self._state = PlaybackState.COMPLETED
        elif self.config.autoplay:
            self._state = PlaybackState.PLAYING
            self._schedule()
        else:
            self._state = PlaybackState.PAUSED

    # ---- commands --------------------------------------------------------

    def load(self, trace: Optional[Trace]) -> None:
        """Replace the trace; any pending tick for the old one is cancelled."""
        self._cancel_timer()
        self._index = 0
        if trace is None or len(trace) == 0:
            self._trace = None
            self._state = PlaybackState.IDLE
            logger.info("PlaybackController.load: empty trace, idle")
        else:
            self._trace = trace
            self._start_from_zero()
            logger.info(
                "PlaybackController.load: %r delay=%dms state=%s",
                trace,
                self._delay_ms,
                self._state.value,
            )
        self._notify()

    def step(self) -> bool:
        """Advance one snapshot. No-op (returns ``False``) when idle or completed."""
        if self._state in (PlaybackState.IDLE, PlaybackState.COMPLETED):
            return False
        self._index += 1
        logger.debug("PlaybackController.step: index=%d", self._index)
        if self._index >= self.last_index:
            self._index = self.last_index
            self._state = PlaybackState.COMPLETED
            self._cancel_timer()
            logger.info("PlaybackController: completed at index %d", self._index)
        self._notify()
        return True

    def pause(self) -> bool:
        if self._state is not PlaybackState.PLAYING:
            return False
        self._cancel_timer()
        self._state = PlaybackState.PAUSED
        logger.debug("PlaybackController.pause: index=%d", self._index)
        return True

    def resume(self) -> bool:
        if self._state is not PlaybackState.PAUSED:
            return False
        self._state = PlaybackState.PLAYING
        self._schedule()
        logger.debug("PlaybackController.resume: index=%d", self._index)
        return True

    def toggle(self) -> bool:
        """Pause when playing, resume when paused."""
        if self._state is PlaybackState.PLAYING:
            return self.pause()
        return self.resume()

    def restart(self) -> None:
        """Back to index 0 and playing. No-op when idle."""
        if self._trace is None:
            return
        self._cancel_timer()
        self._state = PlaybackState.PLAYING
        self._index = 0
        if len(self._trace) == 1:
            self._state = PlaybackState.COMPLETED
        else:
            self._schedule()
        logger.debug("PlaybackController.restart")
        self._notify()

    def set_delay(self, delay_ms: int) -> None:
        """Change the pace of the following ticks; the index is kept."""
        self._delay_ms = validate_delay(delay_ms)
        if self._state is PlaybackState.PLAYING:
            self._schedule()
        logger.debug("PlaybackController.set_delay: %dms", self._delay_ms)

    def stop(self) -> None:
        """Cancel any pending tick and drop the trace."""
        self.load(None)

    def __repr__(self) -> str:
        total = len(self._trace) if self._trace else 0
        return (
            f"PlaybackController({self._state.value}, "
            f"{self._index + 1 if total else 0}/{total}, {self._delay_ms}ms)"
        )
