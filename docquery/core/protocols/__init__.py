"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .llm import LLMProtocol

__all__ = [
    "EmbedderProtocol",
    "LLMProtocol",
]
