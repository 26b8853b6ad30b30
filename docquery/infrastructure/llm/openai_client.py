
import json
import logging

from openai import AsyncOpenAI, OpenAIError

from docquery.core.errors import GenerationFailure

logger = logging.getLogger(__name__)


class OpenAIClient:
    """LLM client for the OpenAI chat completions API."""

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        max_retries: int = 0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI client.

        Args:
            model: Model name.
            api_key: API key, falls back to OPENAI_API_KEY.
            base_url: API URL for OpenAI-compatible servers.
            max_tokens: Max response tokens.
            temperature: Default sampling temperature.
            max_retries: Client-side retries.
            client: Pre-built client, mainly for tests.
        """
        self._client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, max_retries=max_retries
        )
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def _create(self, messages: list[dict], **kwargs) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                **kwargs,
            )
        except OpenAIError as e:
            logger.error(f"LLM request failed: {e}")
            raise GenerationFailure(f"Generation service error: {e}") from e

        if not response.choices:
            raise GenerationFailure("Generation service returned no choices")
        return response.choices[0].message.content or ""

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
            Parsed JSON object, empty if the model returned no content.
        """
        content = await self._create(
            [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            max_tokens=self._max_tokens,
            temperature=self._temperature if temperature is None else temperature,
        )

        try:
            result = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"LLM returned invalid JSON: {content[:100]}")
            raise GenerationFailure("Invalid JSON from generation service") from e

        if not isinstance(result, dict):
            raise GenerationFailure("Generation service did not return a JSON object")
        return result

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
            Response text.
        """
        return await self._create(
            [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=max_tokens or self._max_tokens,
            temperature=self._temperature,
        )
