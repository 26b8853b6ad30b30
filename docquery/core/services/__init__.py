"""Core business services."""
from .retrieval_service import RetrievalService
from .answer_service import AnswerService
from .query_service import QueryService
from .analysis_service import AnalysisService
from .embedding_cache import EmbeddingCache

__all__ = [
    "RetrievalService",
    "AnswerService",
    "QueryService",
    "AnalysisService",
    "EmbeddingCache",
]
