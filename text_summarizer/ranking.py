from __future__ import annotations
import logging, threading, time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Tuple, TypeVar

import numpy as np

from .constants import DEFAULT_DAMPING, DEFAULT_MAX_ITERATIONS, DEFAULT_TIMEOUT, DEFAULT_TOLERANCE
from .datatypes import ScoreVector, SimilarityGraph
from .errors import InvalidParameters, RankingTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")
Check = Callable[[], None]

@dataclass
class RankConfig:
    damping: float = DEFAULT_DAMPING
    tolerance: float = DEFAULT_TOLERANCE


class _Cancelled(Exception):
    """Raised on the worker thread when it must not do any more work."""


class Transition(NamedTuple):
    """Sparse column-normalized weights: entry k moves weights[k] of cols[k] into rows[k]."""
    rows: np.ndarray
    cols: np.ndarray
    weights: np.ndarray


def transition_edges(graph: SimilarityGraph) -> Transition:
    """
    Both directions of every edge, weighted w(i, j) / W(j) with W(j) the total
    edge weight of node j. Isolated nodes have no entries.
    """
    n, m = len(graph.nodes), len(graph.edges)
    i = np.fromiter((e.i for e in graph.edges), dtype=np.intp, count=m)
    j = np.fromiter((e.j for e in graph.edges), dtype=np.intp, count=m)
    w = np.fromiter((e.weight for e in graph.edges), dtype=float, count=m)
    rows = np.concatenate([i, j])
    cols = np.concatenate([j, i])
    w = np.concatenate([w, w])
    out_weight = np.bincount(cols, weights=w, minlength=n)
    return Transition(rows, cols, w / out_weight[cols] if m else w)

def propagate_once(transition: Transition, scores: np.ndarray, damping: float = DEFAULT_DAMPING) -> np.ndarray:
    """
    One PageRank round over the weighted graph:
        PR(Si) = (1-d)/N + d * sum_j w(i, j) / W(j) * PR(Sj)
    """
    n = len(scores)
    flow = np.bincount(transition.rows, weights=transition.weights * scores[transition.cols], minlength=n)
    return (1.0 - damping) / n + damping * flow

def propagate(graph: SimilarityGraph, max_iterations: int, cfg: RankConfig,
              check: Check) -> Tuple[ScoreVector, int]:
    """Run rounds until convergence or `max_iterations`; `check` is called before each round."""
    n = len(graph.nodes)
    if n == 0:
        return {}, 0

    transition = transition_edges(graph)
    scores = np.full(n, 1.0 / n)
    rounds = 0
    while rounds < max_iterations:
        check()
        new_scores = propagate_once(transition, scores, cfg.damping)
        rounds += 1
        diff = float(np.abs(new_scores - scores).sum())
        scores = new_scores
        if diff < cfg.tolerance:
            break
    return {node.idx: float(scores[pos]) for pos, node in enumerate(graph.nodes)}, rounds

def run_bounded(work: Callable[[Check], T], timeout: float, size: int = 0) -> T:
    """
    Run `work(check)` on a worker thread while this call waits on its future
    for at most `timeout` seconds. Whichever finishes first decides the
    outcome: the work's result, or RankingTimeout with nothing attached.

    `check` raises once the deadline has passed or the caller gave up, so the
    work stops at its next call. A result that lands after the deadline is
    discarded like any other late one.
    """
    cancelled = threading.Event()
    deadline = time.monotonic() + timeout

    def check():
        if cancelled.is_set() or time.monotonic() >= deadline:
            raise _Cancelled()

    def guarded():
        result = work(check)
        check()
        return result

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rank")
    try:
        future = executor.submit(guarded)
        try:
            return future.result(timeout=timeout)
        except (FutureTimeout, _Cancelled):
            cancelled.set()
            logger.warning("ranking %d sentences timed out after %gs", size, timeout)
            raise RankingTimeout(timeout) from None
    finally:
        executor.shutdown(wait=False)

def _check_bounds(max_iterations: int, timeout: float) -> None:
    if max_iterations <= 0:
        raise InvalidParameters(f"max_iterations must be positive, got {max_iterations}")
    # NaN fails both comparisons
    if not 0 <= timeout < float("inf"):
        raise InvalidParameters(f"timeout must be a finite number >= 0, got {timeout}")

def rank_with_stats(graph: SimilarityGraph,
                    max_iterations: int = DEFAULT_MAX_ITERATIONS,
                    timeout: float = DEFAULT_TIMEOUT,
                    cfg: Optional[RankConfig] = None) -> Tuple[ScoreVector, int]:
    """
    Rank sentences of `graph` and return (scores, rounds performed).

    Rounds run under `run_bounded`: the worker checks the deadline before every
    round and once after the last, so `timeout == 0` always fails.
    """
    _check_bounds(max_iterations, timeout)
    cfg = cfg or RankConfig()
    scores, rounds = run_bounded(lambda check: propagate(graph, max_iterations, cfg, check),
                                 timeout, len(graph.nodes))
    logger.debug("ranked %d sentences in %d rounds", len(graph.nodes), rounds)
    return scores, rounds

def rank(graph: SimilarityGraph,
         max_iterations: int = DEFAULT_MAX_ITERATIONS,
         timeout: float = DEFAULT_TIMEOUT,
         cfg: Optional[RankConfig] = None) -> ScoreVector:
    scores, _ = rank_with_stats(graph, max_iterations=max_iterations, timeout=timeout, cfg=cfg)
    return scores
