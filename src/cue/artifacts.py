from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .types import Document, Source, Word
from .utils import now_iso, sha256_text, write_json

def _to_jsonable(obj: Any) -> Any:
    # Sources and documents are reported by name, never by content
    if isinstance(obj, Document):
        return {"name": obj.name, "chars": len(obj.text), "sha256": sha256_text(obj.text)}
    if isinstance(obj, Source):
        return {"name": obj.name, "path": obj.path.as_posix() if obj.path else None}
    if isinstance(obj, Word):
        return {"word": obj.text, "count": obj.count, "origins": sorted(obj.origins)}
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, dict):
        return {(k.name if isinstance(k, (Document, Source)) else k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_jsonable(v) for v in obj]
    return obj

class ArtifactLogger:
    def __init__(self, root: Path, run_id: str) -> None:
        self.root = root / run_id
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, rel: str, obj: Any) -> None:
        p = self.root / rel
        write_json(p, _to_jsonable(obj))

    def write_text(self, rel: str, text: str) -> None:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")

    def meta(self) -> Dict[str, Any]:
        return {"timestamp": now_iso(), "root": self.root.as_posix()}
