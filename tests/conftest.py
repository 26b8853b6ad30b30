"""
Shared test fixtures.

Provides fake embedding and generation services so tests never reach a
real model.
"""

import asyncio
from unittest.mock import AsyncMock

import numpy as np
import pytest

from docquery.core.errors import EmbeddingFailure
from docquery.core.models.document import Document


class FakeEmbedder:
    """Embedder returning fixed vectors for known texts.

    Unknown texts get a bag-of-letters vector so similar wording gives
    similar vectors.
    """

    def __init__(self, vectors: dict[str, list[float]] | None = None, fail_on: str | None = None):
        self.vectors = vectors or {}
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.delay = 0.0

    def warmup(self) -> None:
        pass

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_on is not None and self.fail_on in text:
                raise EmbeddingFailure(f"cannot embed '{text[:20]}'")
            if text in self.vectors:
                return np.array(self.vectors[text], dtype=float)
            return letter_vector(text)
        finally:
            self.in_flight -= 1


def letter_vector(text: str) -> np.ndarray:
    vector = np.zeros(26)
    for ch in text.lower():
        if "a" <= ch <= "z":
            vector[ord(ch) - ord("a")] += 1
    return vector


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_llm():
    llm = AsyncMock()
    llm.generate_json = AsyncMock(return_value={"answer": "It requires OAuth2 (Auth Spec)."})
    llm.complete = AsyncMock(return_value="A short summary.")
    return llm


@pytest.fixture
def auth_document():
    return Document(
        id=1,
        name="Auth Spec",
        content="The system supports SSO. It requires OAuth2. Mobile support is planned.",
    )
