"""LLM protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for LLM client."""

    async def generate_json(
        self,
        system_instruction: str,
        user_prompt: str,
        temperature: float | None = None,
    ) -> dict:
        """Request a JSON object response.

        Args:
            system_instruction: System message.
            user_prompt: User message.
            temperature: Override sampling temperature.

        Returns:
            Parsed JSON object.

        Raises:
            GenerationFailure: If the call fails or the output is not a JSON object.
        """
        ...

    async def complete(
        self,
        system_instruction: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str:
        """Request a plain text response.

        Args:
            system_instruction: System message.
            user_prompt: User message.
            max_tokens: Override max response tokens.

        Returns:
            Response text, empty if the model returned nothing.
        """
        ...
