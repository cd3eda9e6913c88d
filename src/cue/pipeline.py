from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, Any, Dict, Iterable, List, Optional

from .artifacts import ArtifactLogger
from .config import CONFIG
from .errors import isolated
from .introspector import Introspector
from .selection import to_document
from .typicality import RepresentativenessEngine, TypicalityEngine
from .types import Command, Document, Source
from .utils import now_iso

logger = logging.getLogger(__name__)

def build_documents(sources: Iterable[Source], relevant: Optional[AbstractSet[str]] = None) -> List[Document]:
    """One document per analysable source; failing files are logged and left out."""
    docs: List[Document] = []
    for src in sources:
        doc: Optional[Document] = None
        with isolated(src.name):
            doc = to_document(src, relevant)
        if doc is not None:
            docs.append(doc)
    return docs

def _artifacts(artifacts_root: Optional[Path], command: Command, run_id: Optional[str]) -> Optional[ArtifactLogger]:
    if artifacts_root is None:
        return None
    return ArtifactLogger(artifacts_root, run_id or f"{command.value}-{now_iso().replace(':', '')}")

def run_concepts(
    sources: Iterable[Source],
    relevant: Optional[AbstractSet[str]] = None,
    top_k: int = CONFIG.concepts_k,
    artifacts_root: Optional[Path] = None,
    run_id: Optional[str] = None,
    introspector: Optional[Introspector] = None,
    cluster: bool = False,
) -> Dict[str, Any]:
    introspector = introspector or Introspector()
    artifacts = _artifacts(artifacts_root, Command.CONCEPTS, run_id)
    sources = list(sources)

    # 1) Single file: its own most frequent words; corpus: tf-idf ranking
    if len(sources) == 1:
        words = []
        with isolated(sources[0].name):
            words = introspector.assigned_concepts(sources[0], relevant, top_k)
    else:
        words = introspector.corpus_concepts(sources, top_k, relevant)
    logger.info("%d concepts from %d sources", len(words), len(sources))

    out = {
        "command": Command.CONCEPTS.value,
        "sources": len(sources),
        "relevant": sorted(relevant or ()),
        "concepts": words,
    }
    if cluster:
        out["clusters"] = introspector.clusters(words, sources, relevant=relevant)
        logger.info("%d clusters of %d concepts", len(out["clusters"]), len(words))
    if artifacts is not None:
        artifacts.write("00_meta.json", {**artifacts.meta(), "command": Command.CONCEPTS, "top_k": top_k})
        artifacts.write("01_concepts.json", out)
    return out

def run_typicality(
    sources: Iterable[Source],
    relevant: Optional[AbstractSet[str]] = None,
    top_k: int = CONFIG.default_topk,
    bandwidth: float = CONFIG.bandwidth,
    artifacts_root: Optional[Path] = None,
    run_id: Optional[str] = None,
) -> Dict[str, Any]:
    engine = TypicalityEngine(bandwidth)
    artifacts = _artifacts(artifacts_root, Command.TYPICALITY, run_id)

    # 1) Feature text per source
    docs = build_documents(sources, relevant)
    if artifacts is not None:
        artifacts.write("00_meta.json", {**artifacts.meta(), "command": Command.TYPICALITY, "top_k": top_k, "bandwidth": bandwidth})
        artifacts.write("01_documents.json", docs)

    # 2) Rank
    result = engine.evaluate(docs, top_k)
    logger.info("%d of %d documents ranked", len(result.ranked), len(docs))

    out = {
        "command": Command.TYPICALITY.value,
        "documents": len(docs),
        "typical": result.ranked,
        "scores": {d: result.scores[d] for d in result.ranked},
    }
    if artifacts is not None:
        artifacts.write("02_typicality.json", out)
    return out

def run_representative(
    sources: Iterable[Source],
    relevant: Optional[AbstractSet[str]] = None,
    k: int = CONFIG.typical_k,
    bandwidth: float = CONFIG.bandwidth,
    artifacts_root: Optional[Path] = None,
    run_id: Optional[str] = None,
) -> Dict[str, Any]:
    engine = RepresentativenessEngine(TypicalityEngine(bandwidth), k)
    artifacts = _artifacts(artifacts_root, Command.REPRESENTATIVE, run_id)

    docs = build_documents(sources, relevant)
    if artifacts is not None:
        artifacts.write("00_meta.json", {**artifacts.meta(), "command": Command.REPRESENTATIVE, "k": k, "bandwidth": bandwidth})
        artifacts.write("01_documents.json", docs)

    result = engine.region(docs, k)
    ranked = result.representatives()
    logger.info("%d representatives over %d documents", len(ranked), len(docs))

    out = {
        "command": Command.REPRESENTATIVE.value,
        "documents": len(docs),
        "representatives": ranked,
        "region": {t: result.region[t] for t in ranked},
    }
    if artifacts is not None:
        artifacts.write("02_region.json", out)
    return out
