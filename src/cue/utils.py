from __future__ import annotations

import hashlib
import json
import time
from pathlib import Path
from typing import Any, Iterable, List

def sha256_text(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8", errors="ignore")).hexdigest()

def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S%z")

def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")

def read_lines(path: Path) -> List[str]:
    # one entry per line; blank lines and '#' comments skipped
    out: List[str] = []
    for line in read_text(path).splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            out.append(line)
    return out

def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)

def safe_relpath(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()

def is_probably_noise_dir(p: Path) -> bool:
    parts = {x.lower() for x in p.parts}
    noise = {".git", "__pycache__", ".venv", "venv", "env", "build", "dist", ".mypy_cache", ".pytest_cache", ".tox"}
    return any(x in parts for x in noise)

def uniq(xs: Iterable[Any]) -> List[Any]:
    # de-dup preserve order
    seen = set(); out = []
    for x in xs:
        if x not in seen:
            seen.add(x); out.append(x)
    return out
