from __future__ import annotations

from typing import List, Optional

from ..types import Location
from .graph import DirectedAcyclicGraph
from .segment import Segment

class SegmentationGraph:
    """Segments of one bounded scope and the containment/reachability edges between them.

    Built once by :class:`~cue.segment.builder.GraphBuilder`; read-only afterwards.
    """

    def __init__(self, dag: DirectedAcyclicGraph[Segment], scope: Optional[Location] = None) -> None:
        self.dag = dag
        self.scope = scope
        self._handles = {dag.payload(h): h for h in dag}

    def __len__(self) -> int:
        return len(self.dag)

    @property
    def root(self) -> Optional[Segment]:
        h = self.dag.root
        return None if h is None else self.dag.payload(h)

    def segments(self) -> List[Segment]:
        return [self.dag.payload(h) for h in self.dag]

    def handle_of(self, segment: Segment) -> int:
        return self._handles[segment]

    def segment_by(self, label: str) -> Optional[Segment]:
        for seg in self.segments():
            if seg.label == label:
                return seg
        return None

    def contains_edge(self, source: Segment, target: Segment) -> bool:
        return self.dag.contains_edge(self.handle_of(source), self.handle_of(target))

    def is_descendant_of(self, child: Segment, parent: Segment) -> bool:
        return self.dag.is_descendant(self.handle_of(child), self.handle_of(parent))

    def leaves(self) -> List[Segment]:
        return [self.dag.payload(h) for h in self.dag.leaves()]

    def has_cycle(self) -> bool:
        return self.dag.has_cycle()

    def enumeration(self) -> List[Segment]:
        """Item order of the selector: root, pre-order from the root, then unreachable vertices."""
        order: List[int] = []
        if self.dag.root is not None:
            order = self.dag.preorder(self.dag.root)
        placed = set(order)
        order.extend(h for h in self.dag if h not in placed)
        return [self.dag.payload(h) for h in order]

    def irrelevant_set(self, capacity: int) -> List[Location]:
        from .selector import IrrelevanceSelector
        return IrrelevanceSelector(self).irrelevant_set(capacity)

    def irrelevant_set_for(self, scope: Location) -> List[Location]:
        return self.irrelevant_set(scope.line_count())

    def relevant_set(self, scope: Location) -> List[Location]:
        from .selector import IrrelevanceSelector
        return IrrelevanceSelector(self).relevant_set(scope)

    def __repr__(self) -> str:
        by_depth = sorted(self.segments(), key=lambda s: s.depth)
        return "SegmentationGraph[" + ", ".join(repr(s) for s in by_depth) + "]"
