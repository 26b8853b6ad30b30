"""In-process cache of chunk embeddings."""

import hashlib
import logging

import numpy as np

from ..models.document import Chunk

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """Chunk embeddings keyed by (document id, content hash, position).

    A changed document yields a new hash, so stale vectors are never
    returned for it.
    """

    def __init__(self, max_entries: int = 10_000):
        self._max_entries = max_entries
        self._entries: dict[tuple[int, str, int], np.ndarray] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _compute_hash(content: str) -> str:
        """Compute content hash."""
        return hashlib.md5(content.encode()).hexdigest()[:12]

    def _key(self, chunk: Chunk) -> tuple[int, str, int]:
        return (chunk.document_id, self._compute_hash(chunk.content), chunk.position)

    def get(self, chunk: Chunk) -> np.ndarray | None:
        vector = self._entries.get(self._key(chunk))
        if vector is None:
            self.misses += 1
        else:
            self.hits += 1
        return vector

    def put(self, chunk: Chunk, vector: np.ndarray) -> None:
        key = self._key(chunk)
        if key not in self._entries and len(self._entries) >= self._max_entries:
            # Evict oldest insertion
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = vector

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
