"""Identifier words of a scope, the raw material of concept assignment."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from ..config import CONFIG
from ..similarity import similarity
from ..syntax.unit import Node, SyntaxUnit
from ..types import Location, NodeKind, Word
from .corrector import WordCorrector
from .stopwords import StopwordSet
from .tokenizer import only_consonants, split_identifier

_NUMBER_RE = re.compile(r"-?\d+")
_EXCEPTION_SUFFIXES = ("Error", "Exception", "Warning")
MIN_IDENTIFIER = 4

class WordExtractor:
    def __init__(
        self,
        blacklist: Iterable[Location] = (),
        stop_sets: Sequence[StopwordSet] = (),
        corrector: Optional[WordCorrector] = None,
        min_similarity: float = CONFIG.correction_min_similarity,
    ) -> None:
        self.blacklist = list(blacklist)
        self.stop_sets = list(stop_sets) or [StopwordSet()]
        self.corrector = corrector or WordCorrector()
        self.min_similarity = min_similarity

    def _blacklisted(self, loc: Location) -> bool:
        return any(b.covers(loc) for b in self.blacklist)

    def _is_stop(self, label: str) -> bool:
        return any(label in s or f"{label}s" in s for s in self.stop_sets)

    @staticmethod
    def _origin(unit: SyntaxUnit, node: Node) -> Optional[str]:
        method = node if node.kind is NodeKind.METHOD else unit.enclosing(node, NodeKind.METHOD)
        if method is None:
            return None
        klass = unit.enclosing(method, NodeKind.TYPE_DECL)
        if klass is None:
            return None
        return f"{klass.name}#{method.name}"

    def words_of(self, identifier: str) -> List[str]:
        """Normalized words of one identifier; empty when the identifier carries none."""
        ident = _NUMBER_RE.sub("", identifier)
        if len(ident) < MIN_IDENTIFIER:
            return []
        if "_" not in ident and only_consonants(ident):
            return []
        if ident.endswith(_EXCEPTION_SUFFIXES) or ident == "BaseException":
            return []
        out: List[str] = []
        for label in split_identifier(ident):
            if not label.strip() or self._is_stop(label):
                continue
            current = label.lower()
            if only_consonants(current) or not self.corrector.contains(current):
                suggestion = self.corrector.suggest(current)
                if suggestion is not None and similarity(current, suggestion) > self.min_similarity:
                    current = suggestion
            out.append(current)
        return out

    def extract(self, unit: SyntaxUnit, scope: Optional[Node] = None) -> List[Word]:
        items: List[Word] = []
        for node in unit.walk(scope or unit.root):
            name = node.name
            if not name or self._blacklisted(node.location):
                continue
            origin = self._origin(unit, node)
            for text in self.words_of(name):
                word = Word(text)
                word.add_origin(origin)
                items.append(word)
        return items
