"""Chunking and scoring strategies."""
from .chunking import Chunker, split_sentences
from .scoring import SimilarityRanker, cosine_similarity

__all__ = [
    "Chunker",
    "split_sentences",
    "SimilarityRanker",
    "cosine_similarity",
]
