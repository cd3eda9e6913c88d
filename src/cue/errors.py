from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)

class CueError(Exception):
    """Base class of the analysis failures a corpus run isolates per file."""

class CycleDetected(CueError):
    """An edge would close a cycle in a segmentation graph.

    Signals a defect in the graph builder, never a property of the input.
    """

    def __init__(self, source: Any, target: Any) -> None:
        super().__init__(f"Edge {source!r} -> {target!r} would close a cycle")
        self.source = source
        self.target = target

class UnresolvedScope(CueError):
    def __init__(self, source_name: str, relevant: Optional[frozenset] = None) -> None:
        names = ", ".join(sorted(relevant or ()))
        super().__init__(f"No function named [{names}] in {source_name}")
        self.source_name = source_name
        self.relevant = relevant

class MalformedUnit(CueError):
    """A module without any locatable program element."""

    def __init__(self, source_name: str) -> None:
        super().__init__(f"Nothing to analyse in {source_name}")
        self.source_name = source_name

@contextmanager
def isolated(name: str) -> Iterator[None]:
    """Contains the failure of one file of a corpus run, logging it by severity."""
    try:
        yield
    except CycleDetected:
        logger.error("Segmentation graph of %s would have a cycle; file skipped", name, exc_info=True)
    except UnresolvedScope as e:
        logger.warning("%s", e)
    except MalformedUnit as e:
        logger.debug("%s", e)
    except SyntaxError as e:
        logger.warning("Cannot parse %s: %s (line %s)", name, e.msg, e.lineno)
