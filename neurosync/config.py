"""
Configuration for NeuroSync.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str | None = None  # Ollama host or OpenAI-compatible endpoint
    api_key: str | None = None
    temperature: float = 0.0
    max_tokens: int = 2000
    timeout: float = 120.0


class GeminiConfig(BaseModel):
    """Gemini configuration for media analysis and the live voice channel."""

    api_key: str | None = None
    media_model: str = "gemini-2.5-flash"
    video_model: str = "gemini-2.5-pro"
    live_model: str = "gemini-2.5-flash-native-audio-preview-09-2025"
    voice_name: str = "Kore"
    video_prompt: str = "Extract key concepts and emotional tone."


class EngineConfig(BaseModel):
    """Ingestion pipeline tuning."""

    placement_radius: float = 300.0
    canvas_center_x: float = 0.0
    canvas_center_y: float = 0.0
    deep_rigidity_threshold: float = 80.0
    deep_length_threshold: int = 100
    degraded_label_chars: int = 50


class LiveConfig(BaseModel):
    """Live voice framing."""

    sample_rate: int = 16000
    frame_size: int = 4096


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    thinking_llm: LLMConfig = Field(default_factory=LLMConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    live: LiveConfig = Field(default_factory=LiveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            NEURO_LLM_PROVIDER: Extraction LLM provider (ollama, openai)
            NEURO_LLM_MODEL: Extraction LLM model name
            NEURO_LLM_BASE_URL: Extraction LLM base URL
            NEURO_LLM_API_KEY: Extraction LLM API key (for OpenAI)
            NEURO_THINKING_PROVIDER: Deep-response LLM provider
            NEURO_THINKING_MODEL: Deep-response LLM model name
            NEURO_THINKING_BASE_URL: Deep-response LLM base URL
            NEURO_THINKING_API_KEY: Deep-response LLM API key
            NEURO_GEMINI_API_KEY: Gemini API key (media analysis, live voice)
            NEURO_GEMINI_LIVE_MODEL: Gemini live model
            NEURO_PLACEMENT_RADIUS: Max radius for new node placement
            NEURO_LIVE_FRAME_SIZE: Samples per outbound audio frame
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("NEURO_LLM_PROVIDER", "ollama"),
                model=get_env("NEURO_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("NEURO_LLM_BASE_URL"),
                api_key=get_env("NEURO_LLM_API_KEY"),
                temperature=get_env("NEURO_LLM_TEMPERATURE", 0.0),
                max_tokens=get_env("NEURO_LLM_MAX_TOKENS", 2000),
                timeout=get_env("NEURO_LLM_TIMEOUT", 120.0),
            ),
            thinking_llm=LLMConfig(
                provider=get_env("NEURO_THINKING_PROVIDER", "ollama"),
                model=get_env("NEURO_THINKING_MODEL", "llama3.1:8b"),
                base_url=get_env("NEURO_THINKING_BASE_URL"),
                api_key=get_env("NEURO_THINKING_API_KEY"),
                temperature=get_env("NEURO_THINKING_TEMPERATURE", 0.0),
                max_tokens=get_env("NEURO_THINKING_MAX_TOKENS", 2000),
                timeout=get_env("NEURO_THINKING_TIMEOUT", 120.0),
            ),
            gemini=GeminiConfig(
                api_key=get_env("NEURO_GEMINI_API_KEY"),
                media_model=get_env("NEURO_GEMINI_MEDIA_MODEL", "gemini-2.5-flash"),
                video_model=get_env("NEURO_GEMINI_VIDEO_MODEL", "gemini-2.5-pro"),
                live_model=get_env(
                    "NEURO_GEMINI_LIVE_MODEL", "gemini-2.5-flash-native-audio-preview-09-2025"
                ),
                voice_name=get_env("NEURO_GEMINI_VOICE", "Kore"),
                video_prompt=get_env(
                    "NEURO_GEMINI_VIDEO_PROMPT", "Extract key concepts and emotional tone."
                ),
            ),
            engine=EngineConfig(
                placement_radius=get_env("NEURO_PLACEMENT_RADIUS", 300.0),
                canvas_center_x=get_env("NEURO_CANVAS_CENTER_X", 0.0),
                canvas_center_y=get_env("NEURO_CANVAS_CENTER_Y", 0.0),
                deep_rigidity_threshold=get_env("NEURO_DEEP_RIGIDITY_THRESHOLD", 80.0),
                deep_length_threshold=get_env("NEURO_DEEP_LENGTH_THRESHOLD", 100),
                degraded_label_chars=get_env("NEURO_DEGRADED_LABEL_CHARS", 50),
            ),
            live=LiveConfig(
                sample_rate=get_env("NEURO_LIVE_SAMPLE_RATE", 16000),
                frame_size=get_env("NEURO_LIVE_FRAME_SIZE", 4096),
            ),
            logging=LoggingConfig(
                level=get_env("NEURO_LOG_LEVEL", "INFO"),
                log_to_file=get_env("NEURO_LOG_TO_FILE", True),
                log_dir=get_env("NEURO_LOG_DIR", "logs"),
                file_rotation=get_env("NEURO_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("NEURO_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("NEURO_LOG_COMPRESSION", "zip"),
                serialize=get_env("NEURO_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Only sections whose environment values differ from the defaults
        override the YAML file.
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file)
        default = cls()

        final_dict = {**config_dict}
        for section in ("llm", "thinking_llm", "gemini", "engine", "live", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


default_config = Config()
