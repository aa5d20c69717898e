"""
Abstract base class for LLM providers.
Backs the extraction gateway (structured output) and the deep responder (free text).
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from neurosync.utils.exceptions import LLMError


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion
    - Structured output validated into a Pydantic model
    """

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        system_prompt: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> BaseModel | str:
        """
        Generate completion from prompt.

        Args:
            prompt: The input prompt
            response_format: Optional Pydantic model for structured output
            system_prompt: Optional system instruction
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Pydantic model instance if response_format provided, else string

        Raises:
            LLMError: If the provider call fails or returns nothing
            ValidationError: If the prompt is empty
        """

    @abstractmethod
    async def close(self):
        """Close any open connections."""


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    content = content.strip()
    if "```json" in content:
        content = content.split("```json")[1].split("```")[0].strip()
    elif content.startswith("```"):
        content = content.split("```")[1].split("```")[0].strip()
    return content


def build_messages(prompt: str, system_prompt: str | None) -> list[dict[str, str]]:
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def parse_reply(
    content: str | None, response_format: type[BaseModel] | None, provider: str
) -> BaseModel | str:
    """
    Turn raw reply text into the caller's requested shape.

    Raises:
        LLMError: If the reply is empty or does not validate against response_format
    """
    if not content:
        raise LLMError(f"{provider} returned empty content")
    if not response_format:
        return content

    try:
        return response_format.model_validate_json(strip_code_fences(content))
    except PydanticValidationError as e:
        raise LLMError(
            f"{provider} reply does not match {response_format.__name__}: {e}",
            context={"raw": content[:500]},
        ) from e
