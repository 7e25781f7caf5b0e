from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .datatypes import ScoreVector, Sentence, SummarizationRequest, SummarizationResult
from .preprocessing import build_document, PreprocessConfig
from .planning import plan, plan_count
from .graphing import build_graph
from .ranking import RankConfig, propagate, run_bounded

logger = logging.getLogger(__name__)

def select(scores: ScoreVector, sentences: Sequence[Sentence], k: int) -> List[Sentence]:
    """Top-k sentences by score (ties go to the earlier sentence), returned in document order."""
    k = max(0, min(k, len(sentences)))
    ranked = sorted(sentences, key=lambda s: (-scores.get(s.idx, 0.0), s.idx))
    selected = ranked[:k]
    selected.sort(key=lambda s: s.idx)  # back to document order
    return selected

def summarize(request: SummarizationRequest,
              preprocess: Optional[PreprocessConfig] = None,
              rank_cfg: Optional[RankConfig] = None) -> SummarizationResult:
    # Pipeline glue
    text = request.text
    doc = build_document(text, cfg=preprocess)
    n = len(doc.sentences)
    total_chars = len(text)

    if request.target_count is not None:
        compression = plan_count(n, request.target_count)
    else:
        compression = plan(total_chars, n, request.target_size)

    stats = dict(
        total_chars=total_chars,
        sentence_count=n,
        mean_sentence_length=total_chars / n if n else 0.0,
        compression_ratio=compression.compression_ratio,
        target_sentence_count=compression.target_sentence_count,
    )
    if n == 0 or compression.target_sentence_count == 0:
        logger.debug("nothing to summarize")
        return SummarizationResult(**stats)

    cfg = rank_cfg or RankConfig()

    def rank_document(check):
        graph = build_graph(doc.sentences, similarity=request.similarity, check=check)
        return propagate(graph, request.max_iterations, cfg, check)

    # the deadline covers graph construction as well as the ranking rounds
    scores, rounds = run_bounded(rank_document, request.timeout, n)
    chosen = select(scores, doc.sentences, compression.target_sentence_count)
    logger.info("selected %d of %d sentences", len(chosen), n)
    return SummarizationResult(sentences=tuple(s.text for s in chosen), iterations=rounds, **stats)

def summarize_text(text: str, **kwargs) -> SummarizationResult:
    """Convenience wrapper: build the request from keyword arguments and run it."""
    return summarize(SummarizationRequest(text=text, **kwargs))
