"""
LLM provider abstraction layer.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from neurosync.core.llm.base import LLMProvider
from neurosync.core.llm.ollama import OllamaLLM
from neurosync.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
