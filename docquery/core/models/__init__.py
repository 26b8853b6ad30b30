"""Domain models."""
from .document import (
    Chunk,
    Document,
    QueryResponse,
    ScoredChunk,
    SourceCitation,
)
from .history import QueryHistory, QueryRecord

__all__ = [
    "Document",
    "Chunk",
    "ScoredChunk",
    "SourceCitation",
    "QueryResponse",
    "QueryRecord",
    "QueryHistory",
]
