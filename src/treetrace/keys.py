"""Key validation and random key generation for the input side of a trace."""

from __future__ import annotations

import logging
import math
from numbers import Rational, Real
from typing import Any, Iterable, Optional

import numpy as np

from .errors import InvalidKeyError
from .nodes import Key

logger = logging.getLogger(__name__)


def validate_key(key: Any, index: int = 0) -> Key:
    """Return *key* as a plain Python number or raise :class:`InvalidKeyError`."""
    if isinstance(key, np.generic):
        key = key.item()
    if isinstance(key, bool) or not isinstance(key, Real):
        raise InvalidKeyError(
            f"key #{index} is not a number: {key!r}", index=index, value=key
        )
    if not isinstance(key, Rational) and not math.isfinite(key):
        raise InvalidKeyError(
            f"key #{index} is not finite: {key!r}", index=index, value=key
        )
    return key  # type: ignore[return-value]


def validate_keys(keys: Iterable[Any]) -> list[Key]:
    """Return *keys* as a list of plain Python numbers.

    Rejects booleans, non-numbers, NaN and infinities with
    :class:`InvalidKeyError` before anything reaches an engine.
    """
    if isinstance(keys, (str, bytes)):
        raise InvalidKeyError("keys must be a sequence of numbers, not text")
    return [validate_key(k, i) for i, k in enumerate(keys)]


def random_keys(
    count: int = 7,
    low: int = 1,
    high: int = 100,
    sort: bool = True,
    seed: Optional[int] = None,
) -> list[int]:
    """Draw *count* integers in ``[low, high]``, ascending unless ``sort=False``.

    The same *seed* always yields the same keys.
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    if low > high:
        raise ValueError(f"empty range [{low}, {high}]")
    rng = np.random.default_rng(seed)
    arr = rng.integers(low, high, size=count, endpoint=True)
    if sort:
        arr = np.sort(arr)
    out = [int(v) for v in arr]
    logger.debug("random_keys: count=%d seed=%s -> %s", count, seed, out)
    return out
