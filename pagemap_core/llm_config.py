#!/usr/bin/env python3
"""
LLMConfig - LLM provider configuration for the extraction call

Model identifiers use the "provider/model" format:
- google/gemini-2.5-flash-preview-05-20 (default, credential from GOOGLE_API_KEY)
- gemini/gemini-2.0-flash
- openai/gpt-4o-mini
- anthropic/claude-3-5-sonnet-20240620
- ollama/qwen2.5:7b (local, no key)

Usage:
    llm_config = LLMConfig(provider="google/gemini-2.5-flash-preview-05-20")
    llm_config = LLMConfig(provider="openai/gpt-4o-mini", api_token="env:MY_OPENAI_KEY")
"""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .config import Config, DEFAULT_MODEL


# Provider to environment variable mapping
PROVIDER_ENV_VARS = {
    "google": "GOOGLE_API_KEY",
    "gemini": "GOOGLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "ollama": None,  # Ollama doesn't need API key
}

# litellm routes Google AI Studio models under "gemini/"
LITELLM_PROVIDER_ALIASES = {
    "google": "gemini",
}

DEFAULT_MODELS = {
    "google": "gemini-2.5-flash-preview-05-20",
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20240620",
    "groq": "llama3-70b-8192",
    "deepseek": "deepseek-chat",
    "ollama": "qwen2.5:7b",
}


@dataclass
class LLMConfig:
    """
    LLM provider configuration.

    Parameters:
        provider: Format "provider/model" e.g. "google/gemini-2.5-flash-preview-05-20"
        api_token: Optional. If not provided, reads from the provider's environment variable.
                   "env:VAR_NAME" reads a custom environment variable.
        base_url: Optional custom endpoint (used for Ollama).
        temperature: LLM temperature
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
    """
    provider: str = DEFAULT_MODEL
    api_token: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.1
    max_tokens: int = 8192
    timeout: int = 300

    def __post_init__(self):
        parts = self.provider.split("/", 1)
        self._provider_name = parts[0].lower()
        self._model_name = parts[1] if len(parts) > 1 else DEFAULT_MODELS.get(self._provider_name, "")
        self._resolved_token = self._resolve_api_token()
        if self.base_url is None and self._provider_name == "ollama":
            self.base_url = os.getenv("PAGEMAP_OLLAMA_HOST", "http://localhost:11434")

    def _resolve_api_token(self) -> Optional[str]:
        """Resolve API token from various sources."""
        if self.api_token is None:
            env_var = PROVIDER_ENV_VARS.get(self._provider_name)
            if env_var:
                return os.getenv(env_var)
            return None

        if self.api_token.startswith("env:"):
            return os.getenv(self.api_token[4:].strip())

        return self.api_token

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def litellm_model(self) -> str:
        """Model string in the form litellm expects"""
        provider = LITELLM_PROVIDER_ALIASES.get(self._provider_name, self._provider_name)
        return f"{provider}/{self._model_name}"

    @property
    def resolved_api_token(self) -> Optional[str]:
        return self._resolved_token

    @property
    def is_local(self) -> bool:
        return self._provider_name == "ollama"

    @property
    def requires_api_key(self) -> bool:
        return not self.is_local

    def validate(self) -> bool:
        """Raise ValueError when a required API key is missing"""
        if self.requires_api_key and not self._resolved_token:
            env_var = PROVIDER_ENV_VARS.get(self._provider_name, "unknown")
            raise ValueError(
                f"API token required for {self._provider_name}. "
                f"Set api_token or {env_var} environment variable."
            )
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view without the token itself"""
        return {
            "provider": self.provider,
            "provider_name": self._provider_name,
            "model_name": self._model_name,
            "base_url": self.base_url,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "has_api_token": self._resolved_token is not None,
            "is_local": self.is_local,
        }

    @classmethod
    def from_config(cls, cfg: Config) -> "LLMConfig":
        """Build from the application Config (model, key, sampling, timeout)."""
        return cls(
            provider=cfg.model_name,
            api_token=cfg.api_key,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
            timeout=cfg.llm_timeout,
        )
