"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable
import numpy as np


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    async def embed(self, text: str) -> np.ndarray:
        """Embed a single text.

        Args:
            text: Chunk or query text.

        Returns:
            Fixed-length embedding vector.

        Raises:
            EmbeddingFailure: If the service fails or returns no vector.
        """
        ...

    def warmup(self) -> None:
        """Pre-load the model for faster inference."""
        ...
