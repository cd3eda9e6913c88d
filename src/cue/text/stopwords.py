from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Iterable, Tuple

from ..utils import read_lines

RESOURCES = Path(__file__).parent / "resources"

# bundled lists; "words" is the corrector's vocabulary, not a stop list
ENGLISH = "english"
PYTHON = "python"
GENERAL = "general"
DEFAULT_LISTS: Tuple[str, ...] = (ENGLISH, PYTHON)

def _normalize(word: str) -> str:
    return word.replace("’", "'").lower()

class StopwordSet:
    """An immutable set of stop words, loaded once from bundled word lists."""

    def __init__(self, names: Iterable[str] = DEFAULT_LISTS, extra: Iterable[str] = ()) -> None:
        self.names = tuple(names)
        words = set()
        for name in self.names:
            for line in read_lines(RESOURCES / f"{name}.txt"):
                words.update(_normalize(w) for w in line.split())
        words.update(_normalize(w) for w in extra)
        self._words: FrozenSet[str] = frozenset(words)

    @classmethod
    def of(cls, *words: str) -> "StopwordSet":
        return cls(names=(), extra=words)

    def extended(self, *words: str) -> "StopwordSet":
        other = StopwordSet.__new__(StopwordSet)
        other.names = self.names
        other._words = self._words | {_normalize(w) for w in words}
        return other

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        # single letters never carry a concept
        return len(word) == 1 or _normalize(word) in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"StopwordSet({', '.join(self.names) or 'custom'}, {len(self._words)} words)"
