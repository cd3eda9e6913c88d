"""Builds the segmentation graph of one bounded scope.

Blocks are linked to the blocks they syntactically contain. A call whose
callee is declared outside the scope pulls the callee body into the graph
("outsider"), and a reference to a class declared inside the scope does the
same with the class' first block. Every new edge charges the child's benefit
and, for containment edges, moves the child's lines out of the parent's
weight.
"""
from __future__ import annotations

import ast
import logging
from typing import Dict, Optional, Set

from ..syntax.unit import Node, SyntaxUnit
from ..types import NodeKind
from .graph import DirectedAcyclicGraph
from .segment import INITIAL_BENEFIT, Segment, benefit, line_weight
from .segmentation import SegmentationGraph

logger = logging.getLogger(__name__)

class GraphBuilder:
    def __init__(self, unit: SyntaxUnit, scope: Node) -> None:
        if scope.kind not in (NodeKind.METHOD, NodeKind.MODULE):
            raise ValueError(f"Scope must be a function or a module, got {scope!r}")
        self.unit = unit
        self.scope = scope
        self._dag: DirectedAcyclicGraph[Node] = DirectedAcyclicGraph()
        self._handles: Dict[int, int] = {}
        # accumulators, frozen into Segments by _finish
        self._weight: Dict[int, int] = {}
        self._benefit: Dict[int, float] = {}
        self._expanded: Set[int] = set()

    def build(self) -> SegmentationGraph:
        if self.scope.kind is NodeKind.METHOD:
            self._catch_method(self.scope)
        else:
            for node in self.unit.own_nodes(self.scope):
                if node.kind is NodeKind.METHOD:
                    self._catch_method(node)
            for block in self.unit.child_blocks(self.scope):
                if id(block) in self._expanded:
                    continue
                self._vertex(block)
                self._expand(block)
        return self._finish()

    # -- vertices and edges ---------------------------------------------------

    def _vertex(self, node: Node) -> int:
        h = self._handles.get(id(node))
        if h is not None:
            return h
        h = self._dag.add_vertex(node)
        self._handles[id(node)] = h
        self._weight[h] = line_weight(node)
        self._benefit[h] = INITIAL_BENEFIT
        if self._dag.root is None:
            self._dag.set_root(h)
        return h

    def _link(self, parent: Node, child: Node) -> bool:
        p, c = self._vertex(parent), self._vertex(child)
        if self._dag.is_descendant(c, p):
            return False
        if self._dag.reaches(c, p):
            # recursive call chain
            logger.debug("Skipping back reference %r -> %r in %s", parent, child, self.unit.source.name)
            return False
        self._dag.add_edge(p, c)
        self._on_edge(p, c)
        return True

    def _on_edge(self, p: int, c: int) -> None:
        child = self._dag.payload(c)
        parent = self._dag.payload(p)
        self._benefit[c] += benefit(self.unit, child, child.depth)
        if parent.location.covers(child.location):
            self._weight[p] = max(0, self._weight[p] - self._weight[c])

    # -- walk -----------------------------------------------------------------

    def _catch_method(self, method: Node) -> None:
        self._vertex(method)
        body = self.unit.first_block(method)
        if body is None:
            return
        self._link(method, body)
        self._expand(body)

    def _expand(self, block: Node) -> None:
        if id(block) in self._expanded:
            return
        self._expanded.add(id(block))
        for child in self.unit.child_blocks(block):
            self._link(block, child)
            self._expand(child)
        for node in self.unit.own_nodes(block):
            if node.kind is NodeKind.CALL:
                self._catch_call(block, node)
            elif node.kind is NodeKind.NAME and isinstance(node.tree.ctx, ast.Load):
                self._catch_type_ref(block, node)

    def _in_scope(self, node: Node) -> bool:
        cur: Optional[Node] = node
        while cur is not None:
            if cur is self.scope:
                return True
            cur = cur.parent
        return False

    def _catch_call(self, block: Node, call: Node) -> None:
        decl = self.unit.resolve_declaration(call)
        if decl is None or decl.kind is not NodeKind.METHOD or self._in_scope(decl):
            return
        body = self.unit.first_block(decl)
        if body is None:
            return
        self._link(block, body)
        self._expand(body)

    def _catch_type_ref(self, block: Node, name: Node) -> None:
        decl = self.unit.resolve_declaration(name)
        if decl is None or decl.kind is not NodeKind.TYPE_DECL:
            return
        if decl.parent is self.unit.root or not self._in_scope(decl):
            return
        first = self.unit.first_block(decl)
        if first is None:
            self._link(block, decl)
            return
        self._link(block, first)
        self._expand(first)

    def _finish(self) -> SegmentationGraph:
        def freeze(h: int, node: Node) -> Segment:
            return Segment(
                label=node.label,
                location=node.location,
                weight=self._weight[h],
                benefit=self._benefit[h],
                depth=node.depth,
                node=node,
            )

        return SegmentationGraph(self._dag.map(freeze), self.scope.location)

def build_graph(unit: SyntaxUnit, scope: Node) -> SegmentationGraph:
    return GraphBuilder(unit, scope).build()
