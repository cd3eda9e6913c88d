"""Located syntax trees over Python's ``ast``.

A :class:`SyntaxUnit` wraps a parsed module into a tree of :class:`Node`
objects. Every statement list owned by a compound statement (function
bodies, ``if``/``else`` branches, loop bodies, ``try`` clauses, ...) is
wrapped into a synthetic ``BLOCK`` node, which is what the segmentation
graph is built from. Module and class bodies hold declarations and are not
blocks.

Nodes compare by identity: two structurally equal statements in different
places are different nodes.
"""
from __future__ import annotations

import ast
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..types import Location, NodeKind, Source

_KINDS = {
    ast.Module: NodeKind.MODULE,
    ast.FunctionDef: NodeKind.METHOD,
    ast.AsyncFunctionDef: NodeKind.METHOD,
    ast.ClassDef: NodeKind.TYPE_DECL,
    ast.Call: NodeKind.CALL,
    ast.Attribute: NodeKind.ATTRIBUTE,
    ast.Name: NodeKind.NAME,
}

# statement lists that hold declarations rather than code
_DECLARATION_CONTAINERS = (ast.Module, ast.ClassDef)

@dataclass(eq=False)
class Node:
    kind: NodeKind
    location: Location
    tree: Optional[ast.AST] = None
    parent: Optional["Node"] = None
    children: List["Node"] = field(default_factory=list)
    # blocks only: the compound statement and the field holding the statements
    owner: Optional[ast.AST] = None
    field_name: Optional[str] = None
    _depth: Optional[int] = field(default=None, repr=False)
    _label: Optional[str] = field(default=None, repr=False)

    @property
    def name(self) -> Optional[str]:
        t = self.tree
        if isinstance(t, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            return t.name
        if isinstance(t, ast.Name):
            return t.id
        if isinstance(t, ast.Attribute):
            return t.attr
        if isinstance(t, ast.arg):
            return t.arg
        return None

    @property
    def depth(self) -> int:
        if self._depth is None:
            self._depth = 0 if self.parent is None else self.parent.depth + 1
        return self._depth

    @property
    def label(self) -> str:
        if self._label is None:
            if self.kind is NodeKind.BLOCK:
                self._label = "\n".join(ast.unparse(c.tree) for c in self.children if c.tree is not None)
            elif self.tree is not None:
                self._label = ast.unparse(self.tree)
            else:
                self._label = ""
        return self._label

    def statements(self) -> List["Node"]:
        return self.children if self.kind is NodeKind.BLOCK else []

    def __repr__(self) -> str:
        what = self.field_name if self.kind is NodeKind.BLOCK else (self.name or type(self.tree).__name__)
        return f"<{self.kind.value} {what} {self.location.start_line}-{self.location.end_line}>"

def _own_location(tree: ast.AST) -> Optional[Location]:
    if getattr(tree, "lineno", None) is None:
        return None
    start = tree.lineno
    end = getattr(tree, "end_lineno", None) or start
    col = getattr(tree, "col_offset", 0) or 0
    end_col = getattr(tree, "end_col_offset", None)
    if end_col is None:
        end_col = col
    return Location(start, col, end, end_col)

def _union(nodes: List[Node]) -> Optional[Location]:
    if not nodes:
        return None
    first = min(nodes, key=lambda n: (n.location.start_line, n.location.start_col))
    last = max(nodes, key=lambda n: (n.location.end_line, n.location.end_col))
    return Location(first.location.start_line, first.location.start_col,
                    last.location.end_line, last.location.end_col)

class SyntaxUnit:
    def __init__(self, source: Source, tree: ast.Module) -> None:
        self.source = source
        self.tree = tree
        self.lines = source.content.splitlines()
        self._by_tree: Dict[int, Node] = {}
        self.root = self._convert(tree, None)
        self._binder = None

    @classmethod
    def parse(cls, source: Source) -> "SyntaxUnit":
        # SyntaxError propagates; the caller decides whether the file is skipped
        tree = ast.parse(source.content, filename=source.name)
        return cls(source, tree)

    # -- construction -------------------------------------------------------

    def _convert(self, tree: ast.AST, parent: Optional[Node]) -> Optional[Node]:
        node = Node(kind=_KINDS.get(type(tree), NodeKind.OTHER), location=Location(1, 0, 1, 0), tree=tree, parent=parent)
        for fname, value in ast.iter_fields(tree):
            if isinstance(value, list) and value and all(isinstance(v, ast.stmt) for v in value) \
                    and not isinstance(tree, _DECLARATION_CONTAINERS):
                block = Node(kind=NodeKind.BLOCK, location=Location(1, 0, 1, 0), parent=node, owner=tree, field_name=fname)
                for stmt in value:
                    child = self._convert(stmt, block)
                    if child is not None:
                        block.children.append(child)
                loc = _union(block.children)
                if loc is not None:
                    block.location = loc
                    node.children.append(block)
            elif isinstance(value, list):
                for v in value:
                    if isinstance(v, ast.AST):
                        child = self._convert(v, node)
                        if child is not None:
                            node.children.append(child)
            elif isinstance(value, ast.AST):
                child = self._convert(value, node)
                if child is not None:
                    node.children.append(child)

        if isinstance(tree, ast.Module):
            n_lines = max(1, len(self.lines))
            last = self.lines[-1] if self.lines else ""
            loc: Optional[Location] = Location(1, 0, n_lines, len(last))
        else:
            loc = _own_location(tree) or _union(node.children)
        if loc is None:
            # expression contexts and operators carry no position
            return None
        node.location = loc
        self._by_tree[id(tree)] = node
        return node

    # -- parser contract ----------------------------------------------------

    def locate(self, node: Node) -> Location:
        return node.location

    def parent(self, node: Node) -> Optional[Node]:
        return node.parent

    def children(self, node: Node) -> List[Node]:
        return node.children

    def node_of(self, tree: ast.AST) -> Optional[Node]:
        return self._by_tree.get(id(tree))

    @property
    def binder(self):
        if self._binder is None:
            from .binding import Binder
            self._binder = Binder(self)
        return self._binder

    def resolve_declaration(self, node: Node) -> Optional[Node]:
        return self.binder.resolve(node)

    def occurrences(self, node: Node) -> int:
        """Number of locations in the unit bound to the same declaration as ``node``."""
        return self.binder.occurrences(node)

    # -- navigation ---------------------------------------------------------

    def walk(self, node: Optional[Node] = None) -> Iterator[Node]:
        stack = [node or self.root]
        while stack:
            cur = stack.pop()
            yield cur
            stack.extend(reversed(cur.children))

    def functions(self) -> List[Node]:
        return [n for n in self.walk() if n.kind is NodeKind.METHOD]

    def enclosing(self, node: Node, kind: NodeKind) -> Optional[Node]:
        cur = node.parent
        while cur is not None and cur.kind is not kind:
            cur = cur.parent
        return cur

    def enclosing_block(self, node: Node) -> Optional[Node]:
        return self.enclosing(node, NodeKind.BLOCK)

    def child_blocks(self, node: Node) -> List[Node]:
        """Nearest blocks below ``node``, not looking inside those blocks."""
        out: List[Node] = []
        stack = list(reversed(node.children))
        while stack:
            cur = stack.pop()
            if cur.kind is NodeKind.BLOCK:
                out.append(cur)
                continue
            stack.extend(reversed(cur.children))
        return out

    def own_nodes(self, block: Node) -> Iterator[Node]:
        """Nodes under ``block`` that do not belong to a nested block."""
        stack = list(reversed(block.children))
        while stack:
            cur = stack.pop()
            if cur.kind is NodeKind.BLOCK:
                continue
            yield cur
            stack.extend(reversed(cur.children))

    def first_block(self, node: Node) -> Optional[Node]:
        if node.kind is NodeKind.BLOCK:
            return node
        blocks = self.child_blocks(node)
        return blocks[0] if blocks else None

    def text(self, location: Location) -> str:
        return "\n".join(self.lines[location.start_line - 1: location.end_line])
