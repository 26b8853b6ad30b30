"""Query service - end-to-end question answering over documents."""

import logging
import re
from typing import Optional, Sequence

from ..errors import (
    EmbeddingFailure,
    GenerationFailure,
    QueryProcessingError,
    QueryValidationError,
)
from ..models.document import Document, QueryResponse
from ..models.history import QueryHistory, QueryRecord
from .answer_service import AnswerService
from .retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 2000


def normalize_query(query: str) -> str:
    """Collapse whitespace and validate the question.

    Raises:
        QueryValidationError: If the question is blank or too long.
    """
    normalized = re.sub(r"\s+", " ", query or "").strip()
    if not normalized:
        raise QueryValidationError("Query cannot be empty")
    if len(normalized) > MAX_QUERY_LENGTH:
        raise QueryValidationError(
            f"Query too long (max {MAX_QUERY_LENGTH} characters)"
        )
    return normalized


class QueryService:
    """Coordinates retrieval and answer synthesis."""

    def __init__(
        self,
        retrieval_service: RetrievalService,
        answer_service: AnswerService,
        history: QueryHistory | None = None,
        top_k: int = 5,
    ):
        """Initialize query service.

        Args:
            retrieval_service: Retrieval service.
            answer_service: Answer service.
            history: Optional log that successful queries are appended to.
            top_k: Number of chunks to cite.
        """
        self._retrieval = retrieval_service
        self._answers = answer_service
        self._history = history
        self._top_k = top_k

    async def query(
        self,
        query: str,
        documents: Sequence[Document],
        user_id: Optional[str] = None,
    ) -> QueryResponse:
        """Answer a question from the given documents.

        Args:
            query: User question.
            documents: Requester's documents.
            user_id: Requester, used to record history.

        Returns:
            Answer with source citations.

        Raises:
            QueryValidationError: If the question is blank or too long.
            QueryProcessingError: If embedding or generation fails.
        """
        question = normalize_query(query)

        try:
            scored_chunks = await self._retrieval.retrieve(
                question, documents, top_k=self._top_k
            )
            response = await self._answers.synthesize(question, scored_chunks)
        except (EmbeddingFailure, GenerationFailure) as e:
            logger.error(f"Error querying documents: {e}")
            raise QueryProcessingError("Failed to process document query") from e

        if self._history is not None and user_id is not None:
            self._history.add(
                QueryRecord(user_id=user_id, query=question, response=response)
            )

        logger.info(
            f"Query answered with {len(response.sources)} sources for '{question[:50]}...'"
        )
        return response
