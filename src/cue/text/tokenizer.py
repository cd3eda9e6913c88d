from __future__ import annotations

import re
from typing import Iterable, List

from .stopwords import StopwordSet

_DIGITS_RE = re.compile(r"\d+")
# lowerUpper and the last capital of an acronym followed by lower case: parseHTTPResponse
_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

def split_identifier(name: str) -> List[str]:
    """Sub-words of an identifier: ``parseHTTPResponse_v2`` -> parse, HTTP, Response, v."""
    out: List[str] = []
    for part in _DIGITS_RE.sub("", name).split("_"):
        out.extend(p for p in _CAMEL_RE.split(part) if p)
    return out

def is_stop_word(words: Iterable[str], stop_sets: Iterable[StopwordSet]) -> bool:
    """True when any of ``words`` belongs to any of ``stop_sets``."""
    sets = list(stop_sets)
    return any(w in s for w in words for s in sets)

def only_consonants(word: str) -> bool:
    return bool(word) and re.fullmatch(r"[^aeiou]+", word) is not None
