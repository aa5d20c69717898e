"""
Remote-call boundaries: graph extraction, deep response, media analysis.

Every call here is total from the caller's point of view. Provider failures
are logged and replaced with a fixed degraded result; nothing is re-raised.
"""

from neurosync.core.llm.base import LLMProvider
from neurosync.core.media.base import MediaAnalyzer
from neurosync.models.extraction import ExtractionPayload, ExtractionResult
from neurosync.utils.exceptions import GatewayDegraded
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

EXTRACTION_SYSTEM_PROMPT = (
    "You extract knowledge graphs from personal notes and conversation. "
    "You always return valid JSON."
)

EXTRACTION_PROMPT = """Extract a knowledge graph from this text. Identify key entities (concepts, people, events, processes) and their relationships.
Also analyze the psychological rigidity/chaos of the input.

Respond with JSON of this shape:
{{
  "entities": [
    {{"name": "<unique name>", "category": "concept|person|event|process", "stream": "dorsal|ventral", "description": "<brief definition based on context>"}}
  ],
  "relations": [
    {{"from": "<source entity name>", "to": "<target entity name>", "relation": "<predicate, e.g. CAUSES, IS_A, FEELS>"}}
  ],
  "analysis": {{"rigidity": <0-100>, "chaos": <0-100>}}
}}

dorsal = structural/action, ventral = semantic/emotional.

Input Text: "{text}"
"""

DEEP_ERROR_TEXT = "Error in cognitive processing."
DEEP_EMPTY_TEXT = "Processing..."


class ExtractionGateway:
    """Text in, ExtractionResult out. Never raises for provider failures."""

    def __init__(
        self,
        llm: LLMProvider,
        degraded_label_chars: int = 50,
        max_tokens: int = 2000,
        temperature: float = 0.0,
    ):
        self.llm = llm
        self.degraded_label_chars = degraded_label_chars
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def extract(self, text: str) -> ExtractionResult:
        """
        Extract entities, relations and analysis from ``text``.

        Returns:
            The service's extraction, or the degraded single-entity result if
            the call failed or the reply did not match the expected shape
        """
        try:
            payload = await self._request(text)
        except Exception as e:
            logger.warning(
                "Extraction degraded: {}", e, error_type=type(e).__name__, length=len(text)
            )
            return ExtractionResult.degraded_for(text, self.degraded_label_chars)

        logger.debug(
            "Extracted {} entities, {} relations",
            len(payload.entities),
            len(payload.relations),
            rigidity=payload.analysis.rigidity,
            chaos=payload.analysis.chaos,
        )
        return ExtractionResult.from_payload(payload)

    async def _request(self, text: str) -> ExtractionPayload:
        result = await self.llm.complete(
            EXTRACTION_PROMPT.format(text=text),
            response_format=ExtractionPayload,
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if isinstance(result, ExtractionPayload):
            return result
        if isinstance(result, str | dict):
            # Providers without structured output hand back raw JSON
            parse = (
                ExtractionPayload.model_validate_json
                if isinstance(result, str)
                else ExtractionPayload.model_validate
            )
            return parse(result)
        raise GatewayDegraded(f"Unexpected extraction reply type: {type(result).__name__}")


class DeepResponder:
    """Second, independent thinking-model pass. Text in, text out."""

    def __init__(self, llm: LLMProvider, max_tokens: int = 2000, temperature: float = 0.0):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def respond(self, text: str) -> str:
        try:
            reply = await self.llm.complete(
                text, max_tokens=self.max_tokens, temperature=self.temperature
            )
        except Exception as e:
            logger.warning("Deep response failed: {}", e, error_type=type(e).__name__)
            return DEEP_ERROR_TEXT
        return str(reply) if reply else DEEP_EMPTY_TEXT


class MediaGateway:
    """Transcription and video analysis. Empty string on any failure."""

    def __init__(self, analyzer: MediaAnalyzer | None, video_prompt: str):
        self.analyzer = analyzer
        self.video_prompt = video_prompt

    async def transcribe(self, data: bytes, mime_type: str) -> str:
        if self.analyzer is None:
            logger.warning("No media analyzer configured; skipping transcription")
            return ""
        try:
            return await self.analyzer.transcribe(data, mime_type)
        except Exception as e:
            logger.warning(
                "Transcription failed: {}", e, mime_type=mime_type, error_type=type(e).__name__
            )
            return ""

    async def analyze_video(self, data: bytes, mime_type: str, prompt: str | None = None) -> str:
        if self.analyzer is None:
            logger.warning("No media analyzer configured; skipping video analysis")
            return ""
        try:
            return await self.analyzer.analyze_video(data, mime_type, prompt or self.video_prompt)
        except Exception as e:
            logger.warning(
                "Video analysis failed: {}", e, mime_type=mime_type, error_type=type(e).__name__
            )
            return ""
