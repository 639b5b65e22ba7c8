# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Weighted random choice over observed transition counts."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import numpy as np

from .utils.random import ensure_rng


class RandomSource(Protocol):
    """Anything able to draw a uniform integer in ``[0, upper)``."""

    def draw(self, upper: int) -> int:
        ...


class NumpyRandomSource:
    """Random source backed by a :class:`numpy.random.Generator`."""

    def __init__(self, rng: int | np.random.Generator | None = None) -> None:
        self.rng = ensure_rng(rng)

    def draw(self, upper: int) -> int:
        if upper <= 0:
            raise ValueError("upper must be positive")
        return int(self.rng.integers(upper))


def pick_index(occurrences: int, counts: Sequence[int], source: RandomSource) -> int:
    """Return the index whose cumulative range contains a uniform draw.

    ``counts`` must be non-empty and sum to ``occurrences``. An entry with a
    zero count is never selected.
    """
    draw = source.draw(occurrences)
    cumulative = np.cumsum(np.asarray(counts, dtype=np.int64))
    return int(np.searchsorted(cumulative, draw, side="right"))
