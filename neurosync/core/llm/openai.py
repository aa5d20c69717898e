"""
OpenAI LLM provider using the official SDK.
"""

from openai import AsyncOpenAI
from pydantic import BaseModel

from neurosync.core.llm.base import LLMProvider, build_messages, parse_reply
from neurosync.utils.exceptions import LLMError, ValidationError
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider.

    Structured output uses JSON mode and validates the reply against the
    requested Pydantic model, so models with optional fields and defaults work.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        system_prompt: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> BaseModel | str:
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        params = {
            "model": self.model,
            "messages": build_messages(prompt, system_prompt),
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if response_format:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.error(
                "OpenAI API error: {}", e, model=self.model, error_type=type(e).__name__
            )
            raise LLMError(f"OpenAI API error: {e}") from e

        return parse_reply(response.choices[0].message.content, response_format, "OpenAI")

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
