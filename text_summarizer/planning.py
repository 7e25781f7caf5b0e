from __future__ import annotations
import logging
from typing import NamedTuple

from .errors import InvalidParameters

logger = logging.getLogger(__name__)


class CompressionPlan(NamedTuple):
    compression_ratio: float
    target_sentence_count: int


def _check_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise InvalidParameters(f"{name} must not be negative, got {value}")


def plan(total_chars: int, sentence_count: int, target_chars: int) -> CompressionPlan:
    """
    Turn a character budget into a sentence budget.

    ratio = target_chars / total_chars (0 for an empty text); the sentence count
    is floor(sentence_count * ratio) kept within [1, sentence_count], or 0 when
    there are no sentences at all.
    """
    _check_non_negative(total_chars=total_chars, sentence_count=sentence_count, target_chars=target_chars)
    ratio = target_chars / total_chars if total_chars else 0.0
    if sentence_count == 0:
        k = 0
    else:
        k = min(max(1, int(sentence_count * ratio)), sentence_count)
    logger.debug("plan: %d chars, %d sentences, target %d chars -> ratio %.4f, k=%d",
                 total_chars, sentence_count, target_chars, ratio, k)
    return CompressionPlan(compression_ratio=ratio, target_sentence_count=k)


def plan_count(sentence_count: int, target_count: int) -> CompressionPlan:
    """Plan for a request that already names how many sentences it wants."""
    _check_non_negative(sentence_count=sentence_count, target_count=target_count)
    k = min(target_count, sentence_count)
    ratio = k / sentence_count if sentence_count else 0.0
    return CompressionPlan(compression_ratio=ratio, target_sentence_count=k)
