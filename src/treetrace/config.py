from __future__ import annotations

from dataclasses import dataclass

# step delays in milliseconds
SPEED_PRESETS: dict[str, int] = {
    "slow": 3000,
    "medium": 1000,
    "fast": 500,
}

DEFAULT_DELAY_MS = SPEED_PRESETS["medium"]


@dataclass
class PlaybackConfig:
    """Options passed to ``PlaybackController``."""

    delay_ms: int = DEFAULT_DELAY_MS
    autoplay: bool = True

    @classmethod
    def preset(cls, name: str, **kwargs) -> PlaybackConfig:
        try:
            delay = SPEED_PRESETS[name]
        except KeyError:
            raise ValueError(
                f"unknown speed preset {name!r}; expected one of {sorted(SPEED_PRESETS)}"
            ) from None
        return cls(delay_ms=delay, **kwargs)


@dataclass
class RecordConfig:
    """Options passed to ``TraceRecorder`` / ``build_trace``."""

    check_invariants: bool = False
    log_steps: bool = False


def validate_delay(delay_ms: object) -> int:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int):
        raise ValueError(f"delay must be an int number of milliseconds, got {delay_ms!r}")
    if delay_ms <= 0:
        raise ValueError(f"delay must be positive, got {delay_ms}")
    return delay_ms
