"""Normalized edit-distance similarity between two texts.

The Levenshtein table is filled one row at a time with numpy. Within a row the
insertion chain ``row[j] = min(row[j], row[j - 1] + 1)`` is resolved in a
single pass: ``row[j] - j`` is a running minimum of ``candidate[j] - j``.
"""
from __future__ import annotations

from functools import lru_cache

import numpy as np

def _codes(s: str) -> np.ndarray:
    return np.frombuffer(s.encode("utf-32-le"), dtype=np.uint32)

def distance(a: str, b: str) -> int:
    """Levenshtein distance (unit cost insertions, deletions, substitutions)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    # the shorter string runs along the row
    if len(a) < len(b):
        a, b = b, a

    cols = _codes(b)
    steps = np.arange(len(b) + 1, dtype=np.int64)
    prev = steps.copy()
    for i, ch in enumerate(_codes(a), start=1):
        cand = np.empty_like(prev)
        cand[0] = i
        # substitution (or match) and deletion
        cand[1:] = np.minimum(prev[:-1] + (cols != ch), prev[1:] + 1)
        prev = np.minimum.accumulate(cand - steps) + steps
    return int(prev[-1])

def normalized_distance(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return distance(a, b) / longest

@lru_cache(maxsize=4096)
def _similarity(a: str, b: str) -> float:
    return 1.0 - normalized_distance(a, b)

def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]; 1 for identical texts, symmetric in its arguments."""
    if a == b:
        return 1.0
    # canonical argument order so both call orders hit the same cache entry
    if b < a:
        a, b = b, a
    return _similarity(a, b)
