from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..types import Word
from .stopwords import StopwordSet

_IRREGULAR = {
    "children": "child",
    "indices": "index",
    "matrices": "matrix",
    "vertices": "vertex",
    "people": "person",
    "men": "man",
    "women": "woman",
    "feet": "foot",
    "teeth": "tooth",
    "mice": "mouse",
    "leaves": "leaf",
    "halves": "half",
    "heroes": "hero",
    "caches": "cache",
    "niches": "niche",
    "data": "data",
    "news": "news",
    "series": "series",
    "species": "species",
}

# (suffix, replacement), first match wins
_RULES = (
    ("ies", "y"),
    ("sses", "ss"),
    ("shes", "sh"),
    ("ches", "ch"),
    ("xes", "x"),
    ("ss", "ss"),
    ("us", "us"),
    ("is", "is"),
    ("s", ""),
)

def singular_of(word: str) -> str:
    w = word.lower()
    if w in _IRREGULAR:
        return _IRREGULAR[w]
    if len(w) <= 3:
        return w
    for suffix, repl in _RULES:
        if w.endswith(suffix):
            return w[: len(w) - len(suffix)] + repl
    return w

class WordCounter:
    """Counts words, ignoring stop words and folding plurals into their singular."""

    def __init__(self, words: Optional[Iterable[Word]] = None, stop_sets: Sequence[StopwordSet] = ()) -> None:
        self.stop_sets = list(stop_sets)
        self._items: Dict[str, Word] = {}
        self.total = 0
        if words is not None:
            self.add_all(words)

    def _is_stop(self, text: str) -> bool:
        return any(text in s for s in self.stop_sets)

    def add_all(self, words: Iterable[Word]) -> None:
        for w in words:
            if w is not None:
                self.add(w)

    def add(self, word: Word) -> None:
        if self._is_stop(word.text):
            return
        key = word.text if word.text in self._items else singular_of(word.text)
        if self._is_stop(key):
            return
        entry = self._items.get(key)
        if entry is None:
            entry = Word(key, count=0)
            self._items[key] = entry
        entry.count += word.count
        entry.origins.update(word.origins)
        self.total += word.count

    def words(self) -> List[Word]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, text: object) -> bool:
        return text in self._items

    def count_of(self, text: str) -> int:
        entry = self._items.get(text)
        return entry.count if entry is not None else 0

    def combine(self, other: "WordCounter") -> "WordCounter":
        merged = WordCounter(stop_sets=self.stop_sets)
        merged.add_all(self.words())
        merged.add_all(other.words())
        return merged

    def most_frequent(self, k: int) -> List[Word]:
        """At most ``k`` words by count descending, ties by text ascending."""
        if k <= 0:
            return []
        ranked = sorted(self._items.values(), key=lambda w: (-w.count, w.text))
        return ranked[:k]

    def __repr__(self) -> str:
        return f"WordCounter({self.total} counted, {len(self._items)} words)"
