from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..syntax.unit import Node, SyntaxUnit
from ..types import Location, NodeKind

INITIAL_BENEFIT = 1.0

@dataclass(frozen=True, eq=False)
class Segment:
    """One block of code in a segmentation graph.

    Equal to another segment only when both stand for the same syntax node;
    labels of structurally different blocks may coincide.
    """
    label: str
    location: Location
    weight: int
    benefit: float
    depth: int
    node: Node

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"Negative weight {self.weight}")
        if self.benefit < 0:
            raise ValueError(f"Negative benefit {self.benefit}")
        if self.depth < 0:
            raise ValueError(f"Negative depth {self.depth}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Segment) and other.node is self.node

    def __hash__(self) -> int:
        return id(self.node)

    def __repr__(self) -> str:
        loc = self.location
        return f"Segment({loc.start_line}-{loc.end_line}, w={self.weight}, b={self.benefit:.2f}, d={self.depth})"

def line_weight(node: Node) -> int:
    return node.location.line_count()

def referenced_elements(unit: SyntaxUnit, node: Node) -> List[Node]:
    """Name-like elements referenced under ``node``.

    Attribute accesses count once for the attribute and hide their receiver;
    calls count their target and then only their arguments.
    """
    found: Dict[int, Node] = {}
    stack = [node]
    while stack:
        cur = stack.pop()
        if cur.kind in (NodeKind.NAME, NodeKind.ATTRIBUTE):
            found.setdefault(id(cur), cur)
            continue
        if cur.kind is NodeKind.CALL:
            call = cur.tree
            target = unit.node_of(call.func)
            if target is not None:
                if target.kind in (NodeKind.NAME, NodeKind.ATTRIBUTE):
                    found.setdefault(id(target), target)
                else:
                    stack.append(target)
            for arg in list(call.args) + [kw.value for kw in call.keywords]:
                n = unit.node_of(arg)
                if n is not None:
                    stack.append(n)
            continue
        stack.extend(cur.children)
    return list(found.values())

def benefit(unit: SyntaxUnit, node: Node, depth: int) -> float:
    """Identifier reuse value of ``node``: references elsewhere in the unit, discounted by depth."""
    divisor = max(depth, 1)
    total = 0.0
    for child in node.children:
        for element in referenced_elements(unit, child):
            total += abs(unit.occurrences(element) - 1) / divisor
    return total
