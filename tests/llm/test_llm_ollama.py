"""
Tests for Ollama LLM provider.
"""

from unittest.mock import AsyncMock, patch

import pytest

from neurosync.core.llm.ollama import OllamaLLM
from neurosync.models import ExtractionPayload
from neurosync.utils.exceptions import LLMError


@pytest.fixture
def ollama_llm():
    """Create Ollama LLM for testing."""
    return OllamaLLM(host="http://localhost:11434", model="llama3.1:8b", timeout=120.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaLLM:
    """Test Ollama LLM provider."""

    async def test_initialization(self, ollama_llm):
        assert ollama_llm.host == "http://localhost:11434"
        assert ollama_llm.model == "llama3.1:8b"
        assert ollama_llm.client is not None

    async def test_complete_simple(self, ollama_llm):
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "Processing the launch plan"}}

            result = await ollama_llm.complete("launch plan", max_tokens=50)

            assert result == "Processing the launch plan"
            assert mock_chat.call_args.kwargs["format"] is None
            assert mock_chat.call_args.kwargs["options"]["num_predict"] == 50

    async def test_complete_structured_passes_schema(self, ollama_llm):
        """Test structured output constrained by the payload's JSON schema."""
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {
                "message": {
                    "content": '{"entities": [{"name": "Anna", "category": "person", '
                    '"stream": "ventral"}], "analysis": {"rigidity": 5, "chaos": 75}}'
                }
            }

            result = await ollama_llm.complete("extract", response_format=ExtractionPayload)

            assert result.entities[0].name == "Anna"
            assert result.analysis.chaos == 75
            assert mock_chat.call_args.kwargs["format"] == ExtractionPayload.model_json_schema()

    async def test_complete_with_temperature(self, ollama_llm):
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "test"}}

            await ollama_llm.complete("test", temperature=0.7, max_tokens=100)

            assert mock_chat.call_args.kwargs["options"]["temperature"] == 0.7

    async def test_api_error(self, ollama_llm):
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.side_effect = ConnectionError("connection refused")

            with pytest.raises(LLMError):
                await ollama_llm.complete("test")

    async def test_invalid_json(self, ollama_llm):
        with patch.object(ollama_llm.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "not json"}}

            with pytest.raises(LLMError):
                await ollama_llm.complete("test", response_format=ExtractionPayload)
