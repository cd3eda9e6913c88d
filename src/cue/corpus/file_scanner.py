from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..config import CONFIG
from ..types import Source
from ..utils import is_probably_noise_dir, read_text, safe_relpath

def scan_py_files(root: Path, exclude: Sequence[str] = CONFIG.exclude) -> List[Path]:
    """Python files under ``root`` in path order, skipping tool directories and excluded names."""
    out: List[Path] = []
    for p in sorted(root.rglob("*.py")):
        if not p.is_file():
            continue
        if is_probably_noise_dir(p):
            continue
        if any(frag in p.name for frag in exclude):
            continue
        out.append(p)
    return out

def load_sources(root: Path, exclude: Sequence[str] = CONFIG.exclude) -> List[Source]:
    if root.is_file():
        return [Source(root.stem, read_text(root), root)]
    return [
        Source(safe_relpath(p, root), read_text(p), p)
        for p in scan_py_files(root, exclude)
    ]
