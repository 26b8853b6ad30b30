"""Analysis service - whole-document summaries and reviews."""

import logging

from ..errors import GenerationFailure
from ..protocols.llm import LLMProtocol

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Unable to generate summary."

SUMMARY_SYSTEM_PROMPT = (
    "You are an AI assistant that creates concise, informative summaries of "
    "product specifications. Focus on key requirements, features, dependencies, "
    "and technical details."
)

ACTIONS_SYSTEM_PROMPT = (
    "You are an AI assistant that extracts actionable items from product "
    "specifications. Identify implementation tasks, technical requirements, "
    "dependencies, and milestones. Return the result as a JSON object."
)

SUGGESTIONS_SYSTEM_PROMPT = (
    "You are an AI product specialist that provides helpful suggestions to "
    "improve product specifications. Focus on completeness, technical clarity, "
    "consistency, and implementability."
)


class AnalysisService:
    """LLM analysis of a single document."""

    def __init__(self, llm: LLMProtocol, summary_max_tokens: int = 500):
        """Initialize analysis service.

        Args:
            llm: LLM client.
            summary_max_tokens: Max tokens for summaries.
        """
        self._llm = llm
        self._summary_max_tokens = summary_max_tokens

    async def summarize(self, content: str) -> str:
        prompt = (
            "Please provide a comprehensive summary of the following document:"
            f"\n\n{content}"
        )
        try:
            summary = await self._llm.complete(
                SUMMARY_SYSTEM_PROMPT, prompt, max_tokens=self._summary_max_tokens
            )
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Failed to summarize document: {e}") from e

        return summary.strip() if summary and summary.strip() else SUMMARY_FALLBACK

    async def extract_action_items(self, content: str) -> list[str]:
        prompt = (
            f"Extract all action items from the following document:\n\n{content}\n\n"
            'Return as JSON: {"actions": ["action 1", "action 2", ...]}'
        )
        return await self._json_list(ACTIONS_SYSTEM_PROMPT, prompt, "actions", 0.2)

    async def suggest_improvements(self, content: str) -> list[str]:
        prompt = (
            f"Please analyze this product specification and suggest improvements:\n\n"
            f"{content}\n\n"
            'Return as JSON: {"suggestions": ["suggestion 1", "suggestion 2", ...]}'
        )
        return await self._json_list(
            SUGGESTIONS_SYSTEM_PROMPT, prompt, "suggestions", 0.4
        )

    async def _json_list(
        self, system: str, prompt: str, key: str, temperature: float
    ) -> list[str]:
        """Call LLM for a JSON object and pull out a list of strings."""
        try:
            result = await self._llm.generate_json(system, prompt, temperature=temperature)
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Failed to generate {key}: {e}") from e

        items = result.get(key) if isinstance(result, dict) else None
        if not isinstance(items, list):
            logger.warning(f"LLM response has no '{key}' list")
            return []
        return [str(item) for item in items if str(item).strip()]
