from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import AbstractSet, List, Optional

from ..errors import MalformedUnit, UnresolvedScope
from ..types import Location, NodeKind
from .unit import Node, SyntaxUnit

@dataclass
class SymbolEntry:
    kind: NodeKind             # METHOD | TYPE_DECL
    name: str                  # short name
    qualname: str              # Class.method, outer.inner etc
    location: Location
    node: Node

# statements that do not make a module worth analysing on their own
_PREAMBLE = (ast.Import, ast.ImportFrom, ast.Pass)

def index_unit(unit: SyntaxUnit) -> List[SymbolEntry]:
    """Functions and classes of a unit, in source order, with qualified names."""
    out: List[SymbolEntry] = []

    def visit(node: Node, prefix: str) -> None:
        for child in node.children:
            if child.kind in (NodeKind.METHOD, NodeKind.TYPE_DECL):
                qn = f"{prefix}.{child.name}" if prefix else child.name
                out.append(SymbolEntry(child.kind, child.name, qn, child.location, child))
                visit(child, qn)
            else:
                visit(child, prefix)

    visit(unit.root, "")
    return out

def is_malformed(unit: SyntaxUnit) -> bool:
    body = unit.tree.body
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant) \
            and isinstance(body[0].value.value, str):
        body = body[1:]
    return all(isinstance(stmt, _PREAMBLE) for stmt in body)

def locate_scope(unit: SyntaxUnit, relevant: Optional[AbstractSet[str]] = None) -> Node:
    """The node analysis is bounded by.

    Without relevant names the whole module is the scope. Otherwise it is the
    first function, in source order, whose short or qualified name is relevant.
    """
    if is_malformed(unit):
        raise MalformedUnit(unit.source.name)
    if not relevant:
        return unit.root
    for entry in index_unit(unit):
        if entry.kind is NodeKind.METHOD and (entry.name in relevant or entry.qualname in relevant):
            return entry.node
    raise UnresolvedScope(unit.source.name, frozenset(relevant))
