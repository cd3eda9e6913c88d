import re
import textwrap

import pytest

from cue.syntax.unit import SyntaxUnit
from cue.types import Document, NodeKind, Source


SAMPLE = textwrap.dedent("""\
    def helper(xs):
        total = 0
        for x in xs:
            total += x
        return total

    def process(items, limit):
        result = []
        for item in items:
            if item > limit:
                result.append(item)
            else:
                result.append(limit)
        while len(result) > 10:
            result.pop()
        return helper(result)
    """)

SINGLE = textwrap.dedent("""\
    def single(a, b):
        c = a + b
        d = c * 2
        return d
    """)

RECURSIVE = textwrap.dedent("""\
    def ping(n):
        if n > 0:
            return pong(n - 1)
        return 0

    def pong(n):
        if n > 0:
            return ping(n - 1)
        return 1

    def start(n):
        return ping(n)
    """)

LOCAL_CLASS = textwrap.dedent("""\
    def outer(values):
        class Box:
            def open(self):
                return values
        box = Box()
        return box.open()
    """)

GRAPH = textwrap.dedent("""\
    class Graph:
        def connect(self, source, target):
            edge = (source, target)
            self.edge = edge
            return edge
    """)

FIB = textwrap.dedent("""\
    def fib(n):
        memo = {0: 0, 1: 1}
        for i in range(2, n + 1):
            memo[i] = memo[i - 1] + memo[i - 2]
        return memo[n]
    """)

# each variant renames one identifier to letters absent from FIB
FIB_RENAMES = [
    (r"\bmemo\b", "QQQQ"),
    (r"\bfib\b", "XXX"),
    (r"\bn\b", "Z"),
    (r"\bi\b", "J"),
    (r"\brange\b", "KKKKK"),
]


def parse(code, name="sample"):
    return SyntaxUnit.parse(Source(name, code))


def find(unit, kind, name=None, line=None):
    for node in unit.walk():
        if node.kind is not kind:
            continue
        if name is not None and node.name != name:
            continue
        if line is not None and node.location.start_line != line:
            continue
        return node
    raise LookupError(f"No {kind} {name} at {line}")


def document(name, text):
    return Document(Source(name, text), text)


@pytest.fixture
def sample_unit():
    return parse(SAMPLE)


@pytest.fixture
def process_scope(sample_unit):
    return find(sample_unit, NodeKind.METHOD, "process")


@pytest.fixture
def fib_documents():
    variants = [
        document(f"variant{i}", re.sub(pattern, repl, FIB))
        for i, (pattern, repl) in enumerate(FIB_RENAMES, start=1)
    ]
    center = document("memoized", FIB)
    # the center goes last so input order cannot explain its rank
    return variants + [center]
