
import logging

import numpy as np
from openai import AsyncOpenAI, OpenAIError

from docquery.core.errors import EmbeddingFailure

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    """Embedder using the OpenAI embeddings API."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
        base_url: str | None = None,
        max_retries: int = 0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI embedder.

        Args:
            model: Embedding model name.
            api_key: API key, falls back to OPENAI_API_KEY.
            base_url: API URL for OpenAI-compatible servers.
            max_retries: Client-side retries.
            client: Pre-built client, mainly for tests.
        """
        self._client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, max_retries=max_retries
        )
        self._model = model

    def warmup(self) -> None:
        """Nothing to load for a remote model."""
        pass

    async def embed(self, text: str) -> np.ndarray:
        try:
            response = await self._client.embeddings.create(
                model=self._model,
                input=text,
            )
        except OpenAIError as e:
            logger.error(f"Error generating embedding: {e}")
            raise EmbeddingFailure("Failed to generate text embedding") from e

        if not response.data or not response.data[0].embedding:
            raise EmbeddingFailure("Embedding service returned an empty vector")

        return np.asarray(response.data[0].embedding, dtype=np.float64)
