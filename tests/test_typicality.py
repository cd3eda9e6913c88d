import math

import pytest

from cue.similarity import similarity
from cue.typicality import RepresentativenessEngine, TypicalityEngine, similarity_matrix

from conftest import document


def test_memoized_fibonacci_is_most_typical(fib_documents):
    engine = TypicalityEngine(bandwidth=0.3)
    ranked = engine.rank(fib_documents, top_k=1)
    assert [d.name for d in ranked] == ["memoized"]


def test_ranking_is_deterministic(fib_documents):
    engine = TypicalityEngine(0.3)
    assert engine.rank(fib_documents) == engine.rank(fib_documents)


def test_degenerate_inputs(fib_documents):
    engine = TypicalityEngine()
    assert engine.rank([]) == []
    assert engine.rank(fib_documents, top_k=0) == []
    assert engine.rank(fib_documents, top_k=-3) == []


def test_single_document_scores_its_diagonal():
    doc = document("only", "x = 1")
    scores = TypicalityEngine(0.3).scores([doc])
    assert scores[doc] == pytest.approx(1.0 / math.sqrt(2 * math.pi))


def test_pair_scores_count_both_orders():
    a, b = document("a", "abcd"), document("b", "abce")
    scores = TypicalityEngine(0.3).scores([a, b])
    t1 = 1.0 / math.sqrt(2 * math.pi)
    off = t1 * math.exp(-(0.25 ** 2) / (2 * 0.3 ** 2))
    assert scores[a] == pytest.approx(t1 + 2 * off)
    assert scores[b] == pytest.approx(scores[a])


def test_ties_keep_input_order():
    docs = [document(str(i), "same text") for i in range(4)]
    assert TypicalityEngine().rank(docs) == docs


def test_top_k_truncates(fib_documents):
    assert len(TypicalityEngine().rank(fib_documents, top_k=4)) == 4
    assert len(TypicalityEngine().rank(fib_documents, top_k=100)) == len(fib_documents)


def test_bandwidth_must_be_positive():
    with pytest.raises(ValueError):
        TypicalityEngine(0)


def test_similarity_matrix_is_symmetric(fib_documents):
    sim = similarity_matrix(fib_documents)
    assert (sim == sim.T).all()
    assert (sim.diagonal() == 1.0).all()


def test_region_partitions_the_rest(fib_documents):
    extra = [document("other", "print('hello')"), document("other2", "print('hello world')")]
    docs = fib_documents + extra
    result = RepresentativenessEngine(k=2).region(docs)
    assert len(result.typical) == 2
    assert set(result.region) == set(result.typical)
    covered = [d for members in result.region.values() for d in members]
    rest = [d for d in docs if d not in result.typical]
    assert sorted(covered, key=id) == sorted(rest, key=id)
    assert len(covered) == len(set(covered))


def test_documents_go_to_most_similar_typical(fib_documents):
    docs = fib_documents + [document("other", "print('hello')")]
    result = RepresentativenessEngine(k=3).region(docs)
    for t, members in result.region.items():
        for m in members:
            best = max(similarity(m.text, o.text) for o in result.typical)
            assert similarity(m.text, t.text) == best


def test_representatives_rank_by_region_size(fib_documents):
    engine = RepresentativenessEngine(k=2)
    result = engine.region(fib_documents + [document("other", "print('hello')")])
    ranked = result.representatives()
    sizes = [len(result.region[t]) for t in ranked]
    assert sizes == sorted(sizes, reverse=True)
    assert result.most_representative() is ranked[0]


def test_empty_region():
    result = RepresentativenessEngine().region([])
    assert result.typical == []
    assert result.most_representative() is None
