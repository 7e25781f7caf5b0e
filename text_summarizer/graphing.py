from __future__ import annotations
import math, logging
from typing import AbstractSet, Callable, Dict, List, Optional, Sequence

from .datatypes import Edge, Sentence, SimilarityGraph, SIMILARITY_MODES
from .errors import InvalidParameters

logger = logging.getLogger(__name__)

def _set_overlap(s1: AbstractSet[str], s2: AbstractSet[str]) -> float:
    common = len(s1 & s2)
    if common == 0:
        return 0.0
    norm = math.log(len(s1)) + math.log(len(s2))
    if norm <= 0.0:
        return float(common)
    return common / norm

def overlap_similarity(t1: Sequence[str], t2: Sequence[str]) -> float:
    """
    Shared terms normalized by sentence length:
        |T1 & T2| / (log|T1| + log|T2|)
    Two single-term sentences have a zero log sum; the raw overlap is used then.
    """
    return _set_overlap(set(t1), set(t2))

def cosine_similarity(v1: Dict[str, float], v2: Dict[str, float]) -> float:
    """Cosine similarity for sparse vectors (dict term -> weight)"""
    if not v1 or not v2:
        return 0.0
    common = set(v1) & set(v2)
    if not common:
        return 0.0
    dot = sum(v1[t] * v2[t] for t in common)
    n1 = math.sqrt(sum(w*w for w in v1.values()))
    n2 = math.sqrt(sum(w*w for w in v2.values()))
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    return dot / (n1 * n2)

def build_graph(sentences: List[Sentence], similarity: str = "overlap",
                check: Optional[Callable[[], None]] = None) -> SimilarityGraph:
    """
    Weighted sentence graph with an edge for every pair sharing terms.

    `check`, when given, is called before each row of pairs so a deadline can
    stop construction part way.
    """
    if similarity not in SIMILARITY_MODES:
        raise InvalidParameters(f"unknown similarity mode: {similarity}")
    edges: List[Edge] = []
    n = len(sentences)
    term_sets = [frozenset(s.tokens) for s in sentences]
    for i in range(n):
        if check is not None:
            check()
        for j in range(i+1, n):
            if similarity == "overlap":
                w = _set_overlap(term_sets[i], term_sets[j])
            else:
                w = cosine_similarity(sentences[i].tf_idf_vector, sentences[j].tf_idf_vector)
            if w > 0.0:
                edges.append(Edge(i=i, j=j, weight=w))
    logger.debug("graph: %d nodes, %d edges (%s)", n, len(edges), similarity)
    return SimilarityGraph(nodes=list(sentences), edges=edges)
