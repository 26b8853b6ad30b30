
import logging

import numpy as np

from ..models.document import ScoredChunk

logger = logging.getLogger(__name__)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two equal-length vectors.

    A zero-norm vector has no direction, so its similarity to anything is 0.0.

    Raises:
        ValueError: If the vectors differ in length.
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()

    if a.shape != b.shape:
        raise ValueError(f"Vector length mismatch: {a.shape[0]} != {b.shape[0]}")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    score = float(np.dot(a, b) / (norm_a * norm_b))
    return max(-1.0, min(1.0, score))


class SimilarityRanker:
    """Orders scored chunks by similarity, best first."""

    def rank(self, pool: list[ScoredChunk], top_k: int) -> list[ScoredChunk]:
        """Sort pool and keep the top_k entries.

        Ties keep pool order, which callers build in document input order
        then chunk position.

        Args:
            pool: Scored chunks in document/position order.
            top_k: Number of results to return.

        Returns:
            At most top_k chunks with 1-based ranks assigned.
        """
        if top_k < 1:
            raise ValueError(f"top_k must be positive, got {top_k}")

        ordered = sorted(pool, key=lambda sc: sc.score, reverse=True)[:top_k]

        for rank, scored in enumerate(ordered, 1):
            scored.rank = rank

        if ordered and logger.isEnabledFor(logging.DEBUG):
            top_scores = ", ".join(f"{sc.score:.2f}" for sc in ordered[:3])
            logger.debug(f"Ranker top-3 scores: [{top_scores}]")

        return ordered
