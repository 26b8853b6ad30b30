"""Document domain models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Document:
    """Snapshot of a document supplied by the document provider."""
    id: int
    name: str
    content: str
    modified_at: Optional[datetime] = None


@dataclass(frozen=True)
class Chunk:
    """Contiguous slice of a document used as the unit of retrieval."""
    document_id: int
    document_name: str
    content: str
    position: int


@dataclass
class ScoredChunk:
    """Chunk with its similarity to the query."""
    chunk: Chunk
    score: float
    rank: int = 0

    @property
    def document_id(self) -> int:
        return self.chunk.document_id

    @property
    def document_name(self) -> str:
        return self.chunk.document_name

    @property
    def content(self) -> str:
        return self.chunk.content


@dataclass(frozen=True)
class SourceCitation:
    """Pointer from an answer back to the supporting document."""
    document_name: str
    document_id: int
    snippet: str
    relevance: float

    def to_dict(self) -> dict:
        return {
            "documentName": self.document_name,
            "documentId": self.document_id,
            "snippet": self.snippet,
            "relevance": self.relevance,
        }


@dataclass(frozen=True)
class QueryResponse:
    """Answer with its source citations, sorted by descending relevance."""
    answer: str
    sources: tuple[SourceCitation, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to the JSON shape persisted and rendered by consumers."""
        return {
            "answer": self.answer,
            "sources": [s.to_dict() for s in self.sources],
        }
