from __future__ import annotations

from typing import List

from ..syntax.unit import Node, SyntaxUnit
from ..types import Location
from .builder import build_graph
from .selector import IrrelevanceSelector

def irrelevant_locations(unit: SyntaxUnit, scope: Node) -> List[Location]:
    """Blacklisted locations of ``scope``, capacity being its line count."""
    graph = build_graph(unit, scope)
    return IrrelevanceSelector(graph).irrelevant_set(scope.location.line_count())

def relevant_locations(unit: SyntaxUnit, scope: Node) -> List[Location]:
    graph = build_graph(unit, scope)
    return IrrelevanceSelector(graph).relevant_set(scope.location)
