from .datatypes import Sentence, Document, Edge, SimilarityGraph, ScoreVector, SummarizationRequest, SummarizationResult
from .errors import SummarizerError, InvalidParameters, RankingTimeout, AcquisitionFailure
from .preprocessing import PreprocessConfig, segment, build_document
from .planning import CompressionPlan, plan, plan_count
from .graphing import build_graph
from .ranking import RankConfig, rank, rank_with_stats
from .summarize import select, summarize, summarize_text
from .acquisition import load_text
