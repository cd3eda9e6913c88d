"""Typicality and representativeness of a set of documents.

A document is typical when it lies close to many others: its score is the
sum of Gaussian kernel weights over its edit distance to every document of
the set, itself included. The representatives are the typical documents
that cover the largest share of the remaining ones.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import CONFIG
from .similarity import similarity
from .types import Document, RegionResult, TypicalityResult
from .utils import uniq

logger = logging.getLogger(__name__)

def similarity_matrix(docs: Sequence[Document]) -> np.ndarray:
    """Pairwise similarities, computed once per unordered pair."""
    n = len(docs)
    sim = np.eye(n)
    for i in range(n):
        for j in range(i + 1, n):
            sim[i, j] = sim[j, i] = similarity(docs[i].text, docs[j].text)
    return sim

class TypicalityEngine:
    def __init__(self, bandwidth: float = CONFIG.bandwidth) -> None:
        if bandwidth <= 0:
            raise ValueError(f"Bandwidth must be positive, got {bandwidth}")
        self.bandwidth = bandwidth

    def kernel(self, sim: np.ndarray, n: int) -> np.ndarray:
        t1 = 1.0 / (max(n - 1, 1) * math.sqrt(2.0 * math.pi))
        t2 = 2.0 * self.bandwidth ** 2
        dist = 1.0 - sim
        return t1 * np.exp(-(dist ** 2) / t2)

    def scores(self, docs: Sequence[Document], sim: Optional[np.ndarray] = None) -> Dict[Document, float]:
        docs = uniq(docs)
        n = len(docs)
        if n == 0:
            return {}
        if sim is None:
            sim = similarity_matrix(docs)
        w = self.kernel(sim, n)
        # each ordered pair credits both ends; the diagonal credits once
        total = 2.0 * w.sum(axis=1) - np.diag(w)
        return {d: float(total[i]) for i, d in enumerate(docs)}

    def evaluate(self, docs: Sequence[Document], top_k: Optional[int] = None) -> TypicalityResult:
        if top_k is not None and top_k <= 0:
            return TypicalityResult(ranked=[], scores={})
        table = self.scores(docs)
        # sorted() is stable: equal scores keep input order
        ranked = sorted(table, key=lambda d: -table[d])
        if top_k is not None:
            ranked = ranked[:top_k]
        logger.debug("Ranked %d documents (h=%s)", len(table), self.bandwidth)
        return TypicalityResult(ranked=ranked, scores=table)

    def rank(self, docs: Sequence[Document], top_k: Optional[int] = None) -> List[Document]:
        return self.evaluate(docs, top_k).ranked

class RepresentativenessEngine:
    def __init__(self, typicality: Optional[TypicalityEngine] = None, k: int = CONFIG.typical_k) -> None:
        self.typicality = typicality or TypicalityEngine()
        self.k = k

    def region(self, docs: Sequence[Document], k: Optional[int] = None) -> RegionResult:
        """Typical set of ``docs`` and, for each typical document, the others closest to it."""
        docs = uniq(docs)
        if not docs:
            return RegionResult(typical=[], region={})
        k = self.k if k is None else k
        typical = uniq(self.typicality.rank(docs, k))
        chosen = set(typical)
        region: Dict[Document, List[Document]] = {t: [] for t in typical}
        if not typical:
            return RegionResult(typical=[], region={})
        for e in docs:
            if e in chosen:
                continue
            best, best_score = typical[0], similarity(e.text, typical[0].text)
            for t in typical[1:]:
                s = similarity(e.text, t.text)
                # strict: ties stay with the earlier typical document
                if s > best_score:
                    best, best_score = t, s
            region[best].append(e)
        return RegionResult(typical=typical, region=region)

    def representatives(self, docs: Sequence[Document], k: Optional[int] = None) -> List[Document]:
        return self.region(docs, k).representatives()

    def most_representative(self, docs: Sequence[Document], k: Optional[int] = None) -> Optional[Document]:
        return self.region(docs, k).most_representative()
