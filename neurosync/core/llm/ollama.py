"""
Ollama LLM provider using the native ollama-python SDK.
"""

import ollama
from pydantic import BaseModel

from neurosync.core.llm.base import LLMProvider, build_messages, parse_reply
from neurosync.utils.exceptions import LLMError, ValidationError
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider.

    Structured output passes the model's JSON schema as the ``format``
    constraint and validates the reply against it.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

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

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.pop("options", {}),
        }
        format_schema = response_format.model_json_schema() if response_format else None

        try:
            response = await self.client.chat(
                model=self.model,
                messages=build_messages(prompt, system_prompt),
                format=format_schema,
                options=options,
                **kwargs,
            )
        except Exception as e:
            logger.error(
                "Ollama API error: {}",
                e,
                model=self.model,
                host=self.host,
                error_type=type(e).__name__,
            )
            raise LLMError(f"Ollama API error: {e}") from e

        return parse_reply(response["message"]["content"], response_format, "Ollama")

    async def close(self):
        """Ollama SDK handles cleanup internally."""
        pass
