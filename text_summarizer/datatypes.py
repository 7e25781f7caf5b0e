from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Optional

import numpy as np

from .constants import DEFAULT_MAX_ITERATIONS, DEFAULT_TARGET_SIZE, DEFAULT_TIMEOUT
from .errors import InvalidParameters

SIMILARITY_MODES = ("overlap", "cosine")

@dataclass
class Sentence:
    idx: int
    text: str
    start: int = 0
    end: int = 0
    tokens: List[str] = field(default_factory=list)
    tf_idf_vector: Dict[str, float] = field(default_factory=dict)

@dataclass
class Document:
    raw_text: str
    sentences: List[Sentence]

@dataclass
class Edge:
    i: int
    j: int
    weight: float  # similarity, i < j

@dataclass
class SimilarityGraph:
    nodes: List[Sentence]
    edges: List[Edge]  # undirected, positive weights only

    def to_matrix(self) -> np.ndarray:
        """Symmetric weight matrix indexed by node position, zero diagonal. Dense; for display."""
        n = len(self.nodes)
        W = np.zeros((n, n), dtype=float)
        for e in self.edges:
            W[e.i, e.j] = e.weight
            W[e.j, e.i] = e.weight
        return W

ScoreVector = Dict[int, float]  # sentence idx -> salience


@dataclass(frozen=True)
class SummarizationRequest:
    text: str
    target_size: Optional[int] = None
    target_count: Optional[int] = None
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    timeout: float = DEFAULT_TIMEOUT
    similarity: str = "overlap"

    def __post_init__(self):
        if self.target_size is not None and self.target_count is not None:
            raise InvalidParameters("give either target_size or target_count, not both")
        if self.target_size is None and self.target_count is None:
            object.__setattr__(self, "target_size", DEFAULT_TARGET_SIZE)
        if self.target_size is not None and self.target_size <= 0:
            raise InvalidParameters(f"target_size must be positive, got {self.target_size}")
        if self.target_count is not None and self.target_count <= 0:
            raise InvalidParameters(f"target_count must be positive, got {self.target_count}")
        if self.max_iterations <= 0:
            raise InvalidParameters(f"max_iterations must be positive, got {self.max_iterations}")
        if not 0 < self.timeout < float("inf"):
            raise InvalidParameters(f"timeout must be a positive finite number, got {self.timeout}")
        if self.similarity not in SIMILARITY_MODES:
            raise InvalidParameters(f"unknown similarity mode: {self.similarity}")


@dataclass(frozen=True)
class SummarizationResult:
    sentences: Tuple[str, ...] = ()
    total_chars: int = 0
    sentence_count: int = 0
    mean_sentence_length: float = 0.0
    compression_ratio: float = 0.0
    target_sentence_count: int = 0
    iterations: int = 0

    @property
    def text(self) -> str:
        return " ".join(self.sentences)

    def __len__(self) -> int:
        return len(self.sentences)
