"""Concept assignment: the words that best describe a source or a corpus."""
from __future__ import annotations

import logging
from typing import AbstractSet, Dict, List, Optional, Sequence

import numpy as np

from .config import CONFIG
from .errors import isolated
from .segment.segments import irrelevant_locations
from .syntax.ast_indexer import locate_scope
from .syntax.unit import SyntaxUnit
from .text.corrector import WordCorrector
from .text.extractor import WordExtractor
from .text.stopwords import StopwordSet
from .text.words import WordCounter
from .types import NodeKind, Source, Word

logger = logging.getLogger(__name__)

def tfidf(counts: np.ndarray) -> np.ndarray:
    """Word x document counts weighted by ``1 + ln(n) - ln(df)``, each column normalized to sum 1."""
    counts = np.asarray(counts, dtype=float)
    if counts.size == 0:
        return counts
    n_docs = counts.shape[1]
    df = np.count_nonzero(counts, axis=1)
    idf = 1.0 + np.log(n_docs) - np.log(np.maximum(df, 1))
    weighted = counts * idf[:, None]
    sums = weighted.sum(axis=0)
    sums[sums == 0] = 1.0
    return weighted / sums

def lsi(counts: np.ndarray, rank: Optional[int] = None) -> np.ndarray:
    """Rank-reduced reconstruction of a word x document matrix, columns normalized by their sums.

    ``rank`` defaults to ``floor(sqrt(rows))``.
    """
    counts = np.asarray(counts, dtype=float)
    if counts.size == 0:
        return counts
    if rank is None:
        rank = int(np.sqrt(counts.shape[0]))
    rank = max(1, min(rank, min(counts.shape)))
    u, s, vt = np.linalg.svd(counts, full_matrices=False)
    weights = (u[:, :rank] * s[:rank]) @ vt[:rank]
    sums = weights.sum(axis=0)
    sums[sums == 0] = 1.0
    return np.abs(weights / sums)

def _cosine(a: np.ndarray, b: np.ndarray) -> float:
    norm = np.linalg.norm(a) * np.linalg.norm(b)
    return 0.0 if norm == 0 else float(a @ b / norm)

def kmeans(vectors: np.ndarray, k: int, max_iter: int = 100) -> List[int]:
    """Cluster index of each row of ``vectors``, by cosine similarity to the cluster centroids.

    Seeds are picked farthest-first starting at row 0, so the result is deterministic.
    Ties go to the lower cluster index.
    """
    n = vectors.shape[0]
    k = max(1, min(k, n))
    seeds = [0]
    while len(seeds) < k:
        gaps = np.min([np.linalg.norm(vectors - vectors[s], axis=1) for s in seeds], axis=0)
        gaps[seeds] = -1.0
        seeds.append(int(np.argmax(gaps)))
    centroids = vectors[seeds].copy()

    labels: List[int] = []
    for _ in range(max_iter):
        fresh = [int(np.argmax([_cosine(v, c) for c in centroids])) for v in vectors]
        if fresh == labels:
            break
        labels = fresh
        for j in range(k):
            members = [i for i, label in enumerate(labels) if label == j]
            # an emptied cluster keeps its last centroid
            if members:
                centroids[j] = vectors[members].mean(axis=0)
    return labels

class Introspector:
    def __init__(self, stop_sets: Optional[Sequence[StopwordSet]] = None, corrector: Optional[WordCorrector] = None) -> None:
        self.stop_sets = list(stop_sets) if stop_sets is not None else [StopwordSet()]
        self.corrector = corrector or WordCorrector()

    def words(self, source: Source, relevant: Optional[AbstractSet[str]] = None) -> List[Word]:
        """Every identifier word of the scope of ``source``, one entry per occurrence."""
        unit = SyntaxUnit.parse(source)
        scope = locate_scope(unit, relevant)
        # a whole module keeps everything; a function drops its irrelevant blocks
        blacklist = [] if scope.kind is NodeKind.MODULE else irrelevant_locations(unit, scope)
        extractor = WordExtractor(blacklist, self.stop_sets, self.corrector)
        return extractor.extract(unit, scope)

    def assigned_concepts(self, source: Source, relevant: Optional[AbstractSet[str]] = None,
                          top_k: int = CONFIG.concepts_k) -> List[Word]:
        counter = WordCounter(self.words(source, relevant), self.stop_sets)
        return counter.most_frequent(top_k)

    def corpus_concepts(self, sources: Sequence[Source], top_k: int = CONFIG.concepts_k,
                        relevant: Optional[AbstractSet[str]] = None) -> List[Word]:
        """Top words of a corpus ranked by the row sums of their tf-idf weights.

        Files that cannot be analysed are skipped.
        """
        if top_k <= 0:
            return []
        per_doc: List[WordCounter] = []
        for src in sources:
            words: Optional[List[Word]] = None
            with isolated(src.name):
                words = self.words(src, relevant)
            if words is None:
                continue
            per_doc.append(WordCounter(words, self.stop_sets))
        if not per_doc:
            return []

        vocabulary: Dict[str, Word] = {}
        for counter in per_doc:
            for w in counter.words():
                entry = vocabulary.setdefault(w.text, Word(w.text, count=0))
                entry.count += w.count
                entry.origins.update(w.origins)
        texts = sorted(vocabulary)
        counts = np.array([[c.count_of(t) for c in per_doc] for t in texts], dtype=float)
        scores = tfidf(counts).sum(axis=1)
        logger.debug("tf-idf matrix %d x %d", counts.shape[0], counts.shape[1])
        # stable sort over the alphabetical vocabulary keeps ties ordered by text
        order = np.argsort(-scores, kind="stable")
        return [vocabulary[texts[i]] for i in order[:top_k]]

    def clusters(self, words: Sequence[Word], sources: Sequence[Source], k: Optional[int] = None,
                 relevant: Optional[AbstractSet[str]] = None) -> List[List[Word]]:
        """Groups ``words`` by how they co-occur across ``sources``.

        Builds a word x document count matrix over the sources mentioning any of the words,
        reduces it with LSI and runs k-means on the word rows. ``k`` defaults to
        ``floor(sqrt(len(words)))``. Empty clusters are left out; words no source
        mentions make up a single group.
        """
        words = list(words)
        if not words:
            return []
        columns: List[List[int]] = []
        for src in sources:
            found: Optional[List[Word]] = None
            with isolated(src.name):
                found = self.words(src, relevant)
            if found is None:
                continue
            counter = WordCounter(found, self.stop_sets)
            hits = [counter.count_of(w.text) for w in words]
            if any(hits):
                columns.append(hits)
        if not columns:
            return [words]

        weights = lsi(np.array(columns, dtype=float).T)
        logger.debug("LSI matrix %d x %d", weights.shape[0], weights.shape[1])
        if k is None:
            k = int(np.sqrt(len(words)))
        labels = kmeans(weights, k)
        groups: Dict[int, List[Word]] = {}
        for word, label in zip(words, labels):
            groups.setdefault(label, []).append(word)
        return [groups[j] for j in sorted(groups)]
