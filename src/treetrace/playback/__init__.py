"""Replay of recorded traces."""

from .controller import PlaybackController, PlaybackState
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "PlaybackController",
    "PlaybackState",
    "Scheduler",
    "TimerHandle",
]
