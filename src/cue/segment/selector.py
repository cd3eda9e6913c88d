"""0/1 knapsack with precedence over the non-root segments of a graph.

Items are the segments in :meth:`SegmentationGraph.enumeration` order with
the root left out; the root is always relevant. Profit is a segment's
benefit and cost its weight. An item only counts as taken when it improves
on the previous row and its predecessor in item order has an edge to it, so
kept segments hang together along the graph.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..config import CONFIG
from ..types import Location
from .segment import Segment
from .segmentation import SegmentationGraph

logger = logging.getLogger(__name__)

@dataclass
class Selection:
    kept: List[Segment]
    blacklisted: List[Segment]

class IrrelevanceSelector:
    def __init__(self, graph: SegmentationGraph, min_capacity: int = CONFIG.min_capacity) -> None:
        self.graph = graph
        self.min_capacity = min_capacity

    def select(self, capacity: int) -> Selection:
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        order = self.graph.enumeration()
        items = order[1:]
        n = len(items)
        if capacity <= self.min_capacity or n <= 1:
            return Selection(kept=list(items), blacklisted=[])

        profit = np.array([0.0] + [s.benefit for s in items])
        weight = np.array([0] + [s.weight for s in items], dtype=np.int64)
        linked = [False] + [self.graph.contains_edge(order[i - 1], order[i]) for i in range(1, n + 1)]

        opt = np.zeros((n + 1, capacity + 1))
        keep = np.zeros((n + 1, capacity + 1), dtype=bool)
        for i in range(1, n + 1):
            opt[i] = opt[i - 1]
            wt = int(weight[i])
            lo = max(wt, 1)
            if lo > capacity:
                continue
            # column 0 never takes anything
            cand = profit[i] + opt[i - 1, lo - wt: capacity + 1 - wt]
            better = cand > opt[i - 1, lo:]
            opt[i, lo:] = np.where(better, cand, opt[i - 1, lo:])
            if linked[i]:
                keep[i, lo:] = better

        kept_idx = set()
        w = capacity
        for i in range(n, 0, -1):
            if keep[i, w]:
                kept_idx.add(i)
                w -= int(weight[i])

        kept = [items[i - 1] for i in range(1, n + 1) if i in kept_idx]
        black = [items[i - 1] for i in range(1, n + 1) if i not in kept_idx]
        logger.debug("Capacity %d: kept %d of %d segments", capacity, len(kept), n)
        return Selection(kept=kept, blacklisted=black)

    def irrelevant_set(self, capacity: int) -> List[Location]:
        return [s.location for s in self.select(capacity).blacklisted]

    def kept(self, capacity: int) -> List[Segment]:
        return self.select(capacity).kept

    def relevant_set(self, scope: Location) -> List[Location]:
        black = set(self.irrelevant_set(scope.line_count()))
        return [s.location for s in self.graph.enumeration() if s.location not in black]
