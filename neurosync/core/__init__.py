"""Provider layer: LLM, media analysis and live voice collaborators."""
