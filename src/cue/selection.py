from __future__ import annotations

from typing import AbstractSet, List, Optional, Tuple

from .segment.segments import irrelevant_locations
from .syntax.ast_indexer import locate_scope
from .syntax.unit import Node, SyntaxUnit
from .types import Document, Location, Source

def scoped_blacklist(unit: SyntaxUnit, relevant: Optional[AbstractSet[str]] = None) -> Tuple[Node, List[Location]]:
    """Scope of ``unit`` for ``relevant`` and its blacklisted locations."""
    scope = locate_scope(unit, relevant)
    return scope, irrelevant_locations(unit, scope)

def feature_text(source: Source, relevant: Optional[AbstractSet[str]] = None) -> str:
    """Text of the relevant scope of ``source`` with blacklisted lines left out.

    Parse, scope and cycle errors propagate to the caller.
    """
    unit = SyntaxUnit.parse(source)
    scope, blacklist = scoped_blacklist(unit, relevant)
    dropped = set()
    for loc in blacklist:
        dropped.update(loc.lines())
    kept = [
        unit.lines[n - 1]
        for n in scope.location.lines()
        if n not in dropped and n - 1 < len(unit.lines)
    ]
    return "\n".join(kept)

def to_document(source: Source, relevant: Optional[AbstractSet[str]] = None) -> Document:
    return Document(source, feature_text(source, relevant))
