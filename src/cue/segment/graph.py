"""A directed acyclic graph stored as an arena.

Vertices are payloads addressed by the integer handle ``add_vertex``
returns; adjacency is kept as per-handle lists in insertion order, so every
traversal is deterministic.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from ..errors import CycleDetected

T = TypeVar("T")
U = TypeVar("U")

@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    cost: float = 0.0

class DirectedAcyclicGraph(Generic[T]):
    def __init__(self) -> None:
        self._payloads: List[T] = []
        self._out: List[List[int]] = []
        self._in: List[List[int]] = []
        self._edges: Dict[Tuple[int, int], Edge] = {}
        self._root: Optional[int] = None

    def __len__(self) -> int:
        return len(self._payloads)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._payloads)))

    def add_vertex(self, payload: T) -> int:
        self._payloads.append(payload)
        self._out.append([])
        self._in.append([])
        return len(self._payloads) - 1

    def payload(self, handle: int) -> T:
        return self._payloads[handle]

    @property
    def root(self) -> Optional[int]:
        return self._root

    def set_root(self, handle: int) -> None:
        self._check(handle)
        self._root = handle

    def _check(self, handle: int) -> None:
        if not 0 <= handle < len(self._payloads):
            raise KeyError(f"No vertex with handle {handle}")

    def add_edge(self, source: int, target: int, cost: float = 0.0) -> bool:
        """Adds ``source -> target``; False when the edge already exists.

        Raises CycleDetected when ``target`` already reaches ``source``.
        """
        self._check(source)
        self._check(target)
        if source == target:
            raise ValueError("Self loops are not allowed")
        if (source, target) in self._edges:
            return False
        if self.reaches(target, source):
            raise CycleDetected(self._payloads[source], self._payloads[target])
        self._edges[(source, target)] = Edge(source, target, cost)
        self._out[source].append(target)
        self._in[target].append(source)
        return True

    def contains_edge(self, source: int, target: int) -> bool:
        return (source, target) in self._edges

    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def successors(self, handle: int) -> List[int]:
        return list(self._out[handle])

    def predecessors(self, handle: int) -> List[int]:
        return list(self._in[handle])

    def reaches(self, start: int, goal: int) -> bool:
        """True when a (possibly empty) path leads from ``start`` to ``goal``."""
        if start == goal:
            return True
        seen = {start}
        stack = [start]
        while stack:
            cur = stack.pop()
            for nxt in self._out[cur]:
                if nxt == goal:
                    return True
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        return False

    def is_descendant(self, child: int, parent: int) -> bool:
        return child != parent and self.reaches(parent, child)

    def leaves(self) -> List[int]:
        return [h for h in self if not self._out[h]]

    def preorder(self, start: int) -> List[int]:
        out: List[int] = []
        seen = {start}
        stack = [start]
        while stack:
            cur = stack.pop()
            out.append(cur)
            for nxt in reversed(self._out[cur]):
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        return out

    def has_cycle(self) -> bool:
        white, grey, black = 0, 1, 2
        color = [white] * len(self)
        for start in self:
            if color[start] != white:
                continue
            color[start] = grey
            stack = [(start, iter(self._out[start]))]
            while stack:
                node, it = stack[-1]
                nxt = next(it, None)
                if nxt is None:
                    color[node] = black
                    stack.pop()
                elif color[nxt] == grey:
                    return True
                elif color[nxt] == white:
                    color[nxt] = grey
                    stack.append((nxt, iter(self._out[nxt])))
        return False

    def map(self, fn: Callable[[int, T], U]) -> "DirectedAcyclicGraph[U]":
        """Same shape and handles, payloads replaced by ``fn(handle, payload)``."""
        other: DirectedAcyclicGraph[U] = DirectedAcyclicGraph()
        other._payloads = [fn(h, p) for h, p in enumerate(self._payloads)]
        other._out = [list(x) for x in self._out]
        other._in = [list(x) for x in self._in]
        other._edges = dict(self._edges)
        other._root = self._root
        return other
