"""Randomness helpers for deterministic behaviour."""

from __future__ import annotations

import hashlib
import os
from typing import Optional

import numpy as np

SEED_ENV_VAR = "PILLAR_CHAIN_SEED"


def deterministic_hash(value: str) -> int:
    """Return a deterministic integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def resolve_seed(seed: Optional[int] = None) -> Optional[int]:
    """Return ``seed``, or one derived from ``PILLAR_CHAIN_SEED`` when set."""
    if seed is not None:
        return seed
    env_value = os.getenv(SEED_ENV_VAR)
    if env_value is None:
        return None
    return deterministic_hash(env_value) % (2**32)


def ensure_rng(seed: int | np.random.Generator | None) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(resolve_seed(seed))
