from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

def _env(key: str, default: str) -> str:
    v = os.getenv(key)
    return default if v is None or v.strip() == "" else v.strip()

def _env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default

def _env_float(key: str, default: float) -> float:
    v = os.getenv(key)
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default

def _env_list(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    return tuple(x.strip() for x in v.split(",") if x.strip())

@dataclass(frozen=True)
class CueConfig:
    # Typicality
    bandwidth: float = _env_float("CUE_BANDWIDTH", 0.3)
    typical_k: int = _env_int("CUE_TYPICAL_K", 5)
    default_topk: int = _env_int("CUE_TOPK", 10)

    # Concepts
    concepts_k: int = _env_int("CUE_CONCEPTS_K", 10)
    correction_accuracy: float = _env_float("CUE_CORRECTION_ACCURACY", 0.5)
    correction_min_similarity: float = _env_float("CUE_CORRECTION_MIN_SIMILARITY", 0.3)

    # Segmentation: scopes spanning this many lines or fewer are never pruned
    min_capacity: int = _env_int("CUE_MIN_CAPACITY", 3)

    # Corpus collection
    exclude: Tuple[str, ...] = field(default_factory=lambda: _env_list("CUE_EXCLUDE", ("test_", "conftest")))

    log_level: str = _env("CUE_LOG_LEVEL", "INFO")

CONFIG = CueConfig()
