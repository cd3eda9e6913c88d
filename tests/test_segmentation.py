import pytest

from cue.segment.builder import GraphBuilder, build_graph
from cue.segment.graph import DirectedAcyclicGraph
from cue.segment.segment import Segment
from cue.segment.segmentation import SegmentationGraph
from cue.segment.segments import irrelevant_locations, relevant_locations
from cue.segment.selector import IrrelevanceSelector
from cue.syntax.unit import Node
from cue.types import Location, NodeKind

from conftest import LOCAL_CLASS, RECURSIVE, SINGLE, find, parse


def spans(segments):
    return [(s.location.start_line, s.location.end_line) for s in segments]


def test_method_scope_graph(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    assert graph.root.node is process_scope
    assert spans(graph.enumeration()) == [
        (7, 16),   # process
        (8, 16),   # its body
        (10, 13),  # for body
        (11, 11),  # if branch
        (13, 13),  # else branch
        (15, 15),  # while body
        (2, 5),    # helper body, reached through the call
        (4, 4),    # helper's for body
    ]
    assert not graph.has_cycle()


def test_outsider_edge(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    body = graph.enumeration()[1]
    assert graph.segment_by(body.label) == body
    helper_body = graph.enumeration()[6]
    assert graph.contains_edge(body, helper_body)
    assert graph.is_descendant_of(helper_body, graph.root)


def test_weight_flows_into_contained_blocks(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    weights = [s.weight for s in graph.enumeration()]
    # helper's body is reached by a call, so the caller keeps its lines
    assert weights == [1, 4, 2, 1, 1, 1, 3, 1]


def test_weight_conservation(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    original = sum(s.node.location.line_count() for s in graph.segments())
    assert sum(s.weight for s in graph.leaves()) <= original
    for s in graph.segments():
        assert 0 <= s.weight <= s.node.location.line_count()


def test_benefit_starts_at_one(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    assert graph.root.benefit == 1.0
    assert all(s.benefit >= 1.0 for s in graph.segments())


def test_segments_compare_by_node(sample_unit, process_scope):
    a = build_graph(sample_unit, process_scope)
    b = build_graph(sample_unit, process_scope)
    assert a.root == b.root
    assert a.enumeration()[3] != a.enumeration()[4]


def test_module_scope_roots_at_first_function(sample_unit):
    graph = build_graph(sample_unit, sample_unit.root)
    assert graph.root.node is find(sample_unit, NodeKind.METHOD, "helper")
    assert len(graph) == 9
    assert not graph.has_cycle()


def test_recursive_calls_do_not_close_cycles():
    unit = parse(RECURSIVE)
    graph = build_graph(unit, find(unit, NodeKind.METHOD, "start"))
    assert not graph.has_cycle()
    assert len(graph) == 6


def test_local_class_joins_graph_once():
    unit = parse(LOCAL_CLASS)
    graph = build_graph(unit, find(unit, NodeKind.METHOD, "outer"))
    assert spans(graph.enumeration()) == [(1, 6), (2, 6), (4, 4)]


def test_scope_must_be_function_or_module(sample_unit):
    block = sample_unit.first_block(find(sample_unit, NodeKind.METHOD, "process"))
    with pytest.raises(ValueError):
        GraphBuilder(sample_unit, block)


def test_blacklist_completeness(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    non_root = graph.enumeration()[1:]
    for capacity in range(0, 25):
        selection = IrrelevanceSelector(graph).select(capacity)
        kept, black = set(selection.kept), set(selection.blacklisted)
        assert kept | black == set(non_root)
        assert not kept & black


@pytest.mark.parametrize("capacity", [0, 1, 2, 3])
def test_small_capacity_blacklists_nothing(sample_unit, process_scope, capacity):
    graph = build_graph(sample_unit, process_scope)
    assert graph.irrelevant_set(capacity) == []


@pytest.mark.parametrize("capacity", [0, 3, 4, 10, 100])
def test_single_block_method_blacklists_nothing(capacity):
    unit = parse(SINGLE)
    graph = build_graph(unit, find(unit, NodeKind.METHOD, "single"))
    assert len(graph) == 2
    assert graph.irrelevant_set(capacity) == []


def test_negative_capacity_rejected(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    with pytest.raises(ValueError):
        graph.irrelevant_set(-1)


def test_kept_segments_follow_edges(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    order = graph.enumeration()
    kept = IrrelevanceSelector(graph).kept(process_scope.location.line_count())
    for seg in kept:
        i = order.index(seg)
        assert graph.contains_edge(order[i - 1], seg)


def test_relevant_and_irrelevant_partition_locations(sample_unit, process_scope):
    black = irrelevant_locations(sample_unit, process_scope)
    white = relevant_locations(sample_unit, process_scope)
    graph = build_graph(sample_unit, process_scope)
    assert set(black).isdisjoint(white)
    assert set(black) | set(white) == {s.location for s in graph.segments()}
    assert graph.root.location in white
    assert graph.irrelevant_set_for(process_scope.location) == black


def chain(*items):
    """Graph root -> s1 -> s2 -> ... over (weight, benefit) pairs."""
    dag = DirectedAcyclicGraph()
    previous = None
    for line, (weight, benefit) in enumerate([(1, 1.0)] + list(items), start=1):
        loc = Location(line, 0, line, 1)
        handle = dag.add_vertex(Segment(f"s{line - 1}", loc, weight, benefit, line - 1, Node(NodeKind.BLOCK, loc)))
        if previous is None:
            dag.set_root(handle)
        else:
            dag.add_edge(previous, handle)
        previous = handle
    return SegmentationGraph(dag)


def test_kept_weight_never_exceeds_capacity(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    selector = IrrelevanceSelector(graph)
    for capacity in range(4, 41):
        assert sum(s.weight for s in selector.kept(capacity)) <= capacity


def test_larger_capacity_may_trade_a_kept_segment():
    # (weight, benefit): s1 alone is best at 4, s2 + s3 beat it at 5
    graph = chain((4, 4.0), (2, 3.0), (3, 3.0))
    selector = IrrelevanceSelector(graph)
    assert [s.label for s in selector.kept(4)] == ["s1"]
    assert [s.label for s in selector.kept(5)] == ["s2", "s3"]
    assert [s.label for s in selector.kept(9)] == ["s1", "s2", "s3"]


def test_helper_loop_kept_at_five_lines_only(sample_unit, process_scope):
    graph = build_graph(sample_unit, process_scope)
    helper_loop = graph.enumeration()[-1]
    assert (helper_loop.location.start_line, helper_loop.location.end_line) == (4, 4)
    selector = IrrelevanceSelector(graph)
    assert helper_loop in selector.kept(5)
    assert helper_loop not in selector.kept(6)
