"""Utility helpers shared across the Pillar Chain package."""

from .random import deterministic_hash, ensure_rng, resolve_seed

__all__ = [
    "deterministic_hash",
    "ensure_rng",
    "resolve_seed",
]
