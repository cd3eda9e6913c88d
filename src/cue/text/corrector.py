from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from ..config import CONFIG
from ..similarity import similarity
from ..utils import read_lines
from .stopwords import RESOURCES
from .tokenizer import only_consonants

class WordCorrector:
    """Spelling correction against a fixed vocabulary by normalized edit distance."""

    def __init__(self, vocabulary: Optional[Iterable[str]] = None) -> None:
        if vocabulary is None:
            vocabulary = load_vocabulary()
        self.vocabulary: FrozenSet[str] = frozenset(w.lower() for w in vocabulary)
        self._ordered = sorted(self.vocabulary)
        self._best = lru_cache(maxsize=8192)(self._closest)

    def contains(self, word: str) -> bool:
        return word.lower() in self.vocabulary

    def _closest(self, word: str) -> Optional[str]:
        best, best_score = None, -1.0
        for candidate in self._ordered:
            # no edit can close a larger length gap than the best score allows
            if best is not None and abs(len(candidate) - len(word)) > (1.0 - best_score) * max(len(candidate), len(word)):
                continue
            score = similarity(word, candidate)
            if score > best_score:
                best, best_score = candidate, score
        return best

    def suggest(self, word: str) -> Optional[str]:
        return self._best(word.lower())

    def correct(self, word: str, accuracy: float = CONFIG.correction_accuracy) -> str:
        """Closest vocabulary word when it is at least ``accuracy`` similar, else ``word``."""
        w = word.lower()
        if w in self.vocabulary:
            return w
        best = self._best(w)
        if best is not None and similarity(w, best) >= accuracy:
            return best
        return word

    only_consonants = staticmethod(only_consonants)

def load_vocabulary(path: Optional[Path] = None) -> FrozenSet[str]:
    return frozenset(read_lines(path or RESOURCES / "words.txt"))
