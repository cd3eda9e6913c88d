import pytest

from cue.errors import MalformedUnit, UnresolvedScope
from cue.syntax.ast_indexer import index_unit, is_malformed, locate_scope
from cue.types import NodeKind

from conftest import GRAPH, SAMPLE, find, parse


def test_blocks_wrap_compound_bodies(sample_unit, process_scope):
    body = sample_unit.first_block(process_scope)
    assert body.kind is NodeKind.BLOCK
    assert (body.location.start_line, body.location.end_line) == (8, 16)
    nested = sample_unit.child_blocks(body)
    assert [(b.location.start_line, b.location.end_line) for b in nested] == [(10, 13), (15, 15)]


def test_module_body_is_not_a_block(sample_unit):
    assert sample_unit.root.kind is NodeKind.MODULE
    assert all(c.kind is not NodeKind.BLOCK for c in sample_unit.root.children)
    assert sample_unit.root.location.end_line == len(SAMPLE.splitlines())


def test_depth_counts_parent_hops(sample_unit, process_scope):
    assert sample_unit.root.depth == 0
    assert process_scope.depth == 1
    assert sample_unit.first_block(process_scope).depth == 2


def test_local_variable_occurrences(sample_unit):
    store = find(sample_unit, NodeKind.NAME, "result", line=8)
    use = find(sample_unit, NodeKind.NAME, "result", line=16)
    assert sample_unit.resolve_declaration(use) is store
    # one store and five loads
    assert sample_unit.occurrences(use) == 6


def test_call_resolves_to_function(sample_unit):
    call = find(sample_unit, NodeKind.CALL, line=16)
    helper = find(sample_unit, NodeKind.METHOD, "helper")
    assert sample_unit.resolve_declaration(call) is helper
    # the def itself and the single call site
    assert sample_unit.occurrences(call) == 2


def test_unresolved_names_group_by_identifier(sample_unit):
    call = find(sample_unit, NodeKind.CALL, line=14)
    assert sample_unit.resolve_declaration(call) is None


def test_self_attribute_resolves_to_member():
    unit = parse(GRAPH)
    load = find(unit, NodeKind.NAME, "edge", line=5)
    attr = find(unit, NodeKind.ATTRIBUTE, "edge", line=4)
    assert unit.resolve_declaration(attr) is attr
    assert unit.resolve_declaration(load) is find(unit, NodeKind.NAME, "edge", line=3)


def test_class_scope_hidden_from_methods():
    unit = parse("class A:\n    size = 1\n    def get(self):\n        return size\n")
    load = find(unit, NodeKind.NAME, "size", line=4)
    assert unit.resolve_declaration(load) is None


def test_index_qualnames():
    unit = parse(GRAPH)
    assert [e.qualname for e in index_unit(unit)] == ["Graph", "Graph.connect"]


def test_locate_scope(sample_unit):
    assert locate_scope(sample_unit) is sample_unit.root
    assert locate_scope(sample_unit, {"process"}).name == "process"
    assert locate_scope(parse(GRAPH), {"Graph.connect"}).name == "connect"
    with pytest.raises(UnresolvedScope):
        locate_scope(sample_unit, {"missing"})


@pytest.mark.parametrize("code", ["", '"""Only a docstring."""\n', "import os\nfrom sys import path\n"])
def test_malformed_units(code):
    unit = parse(code)
    assert is_malformed(unit)
    with pytest.raises(MalformedUnit):
        locate_scope(unit)


def test_syntax_error_propagates():
    with pytest.raises(SyntaxError):
        parse("def broken(:\n")


def test_parser_contract(sample_unit, process_scope):
    body = sample_unit.first_block(process_scope)
    assert sample_unit.parent(body) is process_scope
    assert body in sample_unit.children(process_scope)
    assert sample_unit.locate(body) == body.location
    assert [f.name for f in sample_unit.functions()] == ["helper", "process"]
    call = find(sample_unit, NodeKind.CALL, line=16)
    assert sample_unit.enclosing_block(call) is body
    assert sample_unit.enclosing(call, NodeKind.METHOD) is process_scope
    assert sample_unit.text(process_scope.location).startswith("def process(items, limit):")
