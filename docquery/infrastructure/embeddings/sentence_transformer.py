import asyncio
import logging
from functools import cached_property

import numpy as np
from sentence_transformers import SentenceTransformer

from docquery.core.errors import EmbeddingFailure

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2"):
        self._model_name = model_name

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    def warmup(self) -> None:
        _ = self.model
        logger.info("Embedding model warmed up")

    def encode(self, texts: str | list[str]) -> np.ndarray:
        return self.model.encode(texts, convert_to_numpy=True)

    async def embed(self, text: str) -> np.ndarray:
        try:
            vector = await asyncio.to_thread(self.encode, text)
        except Exception as e:
            logger.error(f"Error generating embedding: {e}")
            raise EmbeddingFailure("Failed to generate text embedding") from e

        if vector is None or np.asarray(vector).size == 0:
            raise EmbeddingFailure("Embedding model returned an empty vector")
        return np.asarray(vector, dtype=np.float64)
