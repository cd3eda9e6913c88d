import pytest

from cue.errors import CycleDetected
from cue.segment.graph import DirectedAcyclicGraph


def chain(*payloads):
    dag = DirectedAcyclicGraph()
    handles = [dag.add_vertex(p) for p in payloads]
    for a, b in zip(handles, handles[1:]):
        dag.add_edge(a, b)
    return dag, handles


def test_first_vertex_is_not_root_until_set():
    dag = DirectedAcyclicGraph()
    h = dag.add_vertex("a")
    assert dag.root is None
    dag.set_root(h)
    assert dag.root == h


def test_edge_closing_cycle_is_refused():
    dag, (a, b, c) = chain("a", "b", "c")
    with pytest.raises(CycleDetected):
        dag.add_edge(c, a)
    assert not dag.contains_edge(c, a)
    assert not dag.has_cycle()


def test_self_loop_rejected():
    dag, (a,) = chain("a")
    with pytest.raises(ValueError):
        dag.add_edge(a, a)


def test_duplicate_edge_is_ignored():
    dag, (a, b) = chain("a", "b")
    assert dag.add_edge(a, b) is False
    assert len(dag.edges()) == 1


def test_no_mutual_ancestors():
    dag = DirectedAcyclicGraph()
    hs = [dag.add_vertex(i) for i in range(6)]
    for s, t in [(0, 1), (0, 2), (1, 3), (2, 3), (3, 4), (1, 5)]:
        dag.add_edge(hs[s], hs[t])
    for s, t in [(4, 0), (3, 1), (5, 0)]:
        with pytest.raises(CycleDetected):
            dag.add_edge(hs[s], hs[t])
    for a in hs:
        for b in hs:
            assert not (dag.is_descendant(a, b) and dag.is_descendant(b, a))


def test_preorder_follows_insertion_order():
    dag = DirectedAcyclicGraph()
    r, x, y, z = (dag.add_vertex(p) for p in "rxyz")
    dag.add_edge(r, y)
    dag.add_edge(r, x)
    dag.add_edge(y, z)
    assert dag.preorder(r) == [r, y, z, x]


def test_leaves_and_descendants():
    dag, (a, b, c) = chain("a", "b", "c")
    assert dag.predecessors(b) == [a]
    assert dag.successors(b) == [c]
    assert dag.leaves() == [c]
    assert dag.is_descendant(c, a)
    assert not dag.is_descendant(a, c)
    assert not dag.is_descendant(a, a)


def test_map_keeps_shape():
    dag, (a, b) = chain("a", "b")
    dag.set_root(a)
    upper = dag.map(lambda h, p: p.upper())
    assert upper.payload(a) == "A"
    assert upper.contains_edge(a, b)
    assert upper.root == a
