from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set

class NodeKind(str, Enum):
    MODULE = "MODULE"
    BLOCK = "BLOCK"
    METHOD = "METHOD"
    TYPE_DECL = "TYPE_DECL"
    CALL = "CALL"
    ATTRIBUTE = "ATTRIBUTE"
    NAME = "NAME"
    OTHER = "OTHER"

class Command(str, Enum):
    CONCEPTS = "concepts"
    TYPICALITY = "typicality"
    REPRESENTATIVE = "representative"

@dataclass(frozen=True)
class Location:
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __post_init__(self) -> None:
        if (self.end_line, self.end_col) < (self.start_line, self.start_col):
            raise ValueError(f"Location ends before it starts: {self}")

    def covers(self, other: "Location") -> bool:
        return (self.start_line, self.start_col) <= (other.start_line, other.start_col) \
            and (other.end_line, other.end_col) <= (self.end_line, self.end_col)

    def line_count(self) -> int:
        return abs(self.end_line - self.start_line) + 1

    def lines(self) -> range:
        return range(self.start_line, self.end_line + 1)

@dataclass(frozen=True, eq=False)
class Source:
    """A source file of the corpus. Compared by identity."""
    name: str
    content: str
    path: Optional[Path] = None

    def __repr__(self) -> str:
        return f"Source({self.name!r})"

@dataclass(frozen=True, eq=False)
class Document:
    """A source reduced to the text the typicality analysis compares."""
    source: Source
    text: str

    @property
    def name(self) -> str:
        return self.source.name

    def __repr__(self) -> str:
        return f"Document({self.source.name!r}, {len(self.text)} chars)"

@dataclass(eq=False)
class Word:
    text: str
    count: int = 1
    origins: Set[str] = field(default_factory=set)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Word) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)

    def add_origin(self, origin: Optional[str]) -> None:
        if origin:
            self.origins.add(origin)

    def __str__(self) -> str:
        return f"{self.text} ({self.count})"

@dataclass
class TypicalityResult:
    ranked: List[Document]
    scores: Dict[Document, float]

@dataclass
class RegionResult:
    typical: List[Document]
    region: Dict[Document, List[Document]]

    def representatives(self) -> List[Document]:
        order = {d: i for i, d in enumerate(self.typical)}
        return sorted(self.region, key=lambda t: (-len(self.region[t]), order[t]))

    def most_representative(self) -> Optional[Document]:
        ranked = self.representatives()
        return ranked[0] if ranked else None
