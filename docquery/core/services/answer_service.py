"""Answer service - grounded, cited answer synthesis."""

import asyncio
import logging
from typing import Sequence

from ..errors import GenerationFailure
from ..models.document import QueryResponse, ScoredChunk, SourceCitation
from ..protocols.llm import LLMProtocol

logger = logging.getLogger(__name__)

NO_RESULTS_ANSWER = (
    "I couldn't find any relevant information in your documents to answer this query."
)
NO_ANSWER_FALLBACK = "I couldn't generate a proper response based on your documents."

SYSTEM_PROMPT = """You are an AI assistant that helps users understand their documents.
Answer using only the provided context. Do not add facts that are not in the context.
When you use information from an excerpt, cite the document it came from by name."""

PROMPT_WITH_CONTEXT = """Based on the following document excerpts, answer the user's question comprehensively. Use specific details from the provided context and cite your sources by referencing the document names.

Context:
{context}

Question: {question}

Respond with a JSON object in the following format:
{{
  "answer": "Your answer here, citing specific documents when referencing information",
  "confidence": 0.95
}}"""


def make_snippet(text: str, length: int = 200) -> str:
    """First `length` characters of text, with "..." appended if truncated."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


class AnswerService:
    """Turns retrieved chunks into an answer with citations."""

    def __init__(
        self,
        llm: LLMProtocol,
        snippet_length: int = 200,
        temperature: float = 0.3,
        timeout: float | None = 60.0,
    ):
        """Initialize answer service.

        Args:
            llm: LLM client.
            snippet_length: Max citation snippet length before truncation.
            temperature: Sampling temperature for the answer.
            timeout: Generation timeout in seconds, None to disable.
        """
        self._llm = llm
        self._snippet_length = snippet_length
        self._temperature = temperature
        self._timeout = timeout

    def _format_context(self, scored_chunks: Sequence[ScoredChunk]) -> str:
        """Format chunks as numbered context for LLM."""
        return "\n\n".join(
            f'[{i}] From "{sc.document_name}": {sc.content}'
            for i, sc in enumerate(scored_chunks, 1)
        )

    def _build_citations(
        self, scored_chunks: Sequence[ScoredChunk]
    ) -> tuple[SourceCitation, ...]:
        citations = [
            SourceCitation(
                document_name=sc.document_name,
                document_id=sc.document_id,
                snippet=make_snippet(sc.content, self._snippet_length),
                relevance=round(sc.score, 2),
            )
            for sc in scored_chunks
        ]
        citations.sort(key=lambda c: c.relevance, reverse=True)
        return tuple(citations)

    async def synthesize(
        self, query: str, scored_chunks: Sequence[ScoredChunk]
    ) -> QueryResponse:
        """Generate an answer grounded in the scored chunks.

        Args:
            query: User question.
            scored_chunks: Retrieved chunks in rank order.

        Returns:
            Answer with one citation per chunk.

        Raises:
            GenerationFailure: If the LLM call fails.
        """
        if not scored_chunks:
            logger.info(f"No chunks for '{query[:50]}...', returning fallback answer")
            return QueryResponse(answer=NO_RESULTS_ANSWER, sources=())

        prompt = PROMPT_WITH_CONTEXT.format(
            context=self._format_context(scored_chunks), question=query
        )

        try:
            result = await asyncio.wait_for(
                self._llm.generate_json(
                    SYSTEM_PROMPT, prompt, temperature=self._temperature
                ),
                self._timeout,
            )
        except GenerationFailure:
            raise
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"Generation timed out after {self._timeout}s") from e
        except Exception as e:
            raise GenerationFailure(f"Failed to generate answer: {e}") from e

        answer = result.get("answer") if isinstance(result, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            logger.warning(f"LLM returned no usable answer for '{query[:50]}...'")
            answer = NO_ANSWER_FALLBACK

        return QueryResponse(answer=answer, sources=self._build_citations(scored_chunks))
