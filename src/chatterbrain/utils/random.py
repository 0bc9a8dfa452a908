"""Randomness helpers for deterministic behaviour."""

from __future__ import annotations

import hashlib

import numpy as np


def deterministic_hash(value: str) -> int:
    """Return a deterministic integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def ensure_rng(seed: int | np.random.Generator | None) -> np.random.Generator:
    """Return ``seed`` if it is already a generator, otherwise build one from it."""
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(seed)
