import logging
from typing import Optional, Any

import litellm

from .config import config
from .llm import SimpleOllama
from .llm_config import LLMConfig

logger = logging.getLogger(__name__)


def setup_llm(llm_config: Optional[LLMConfig] = None) -> Any:
    """
    Create the LLM client used by the extraction call.

    Args:
        llm_config: Optional LLMConfig. If not provided, built from the application config.

    Returns:
        LLM client instance with ainvoke() method
    """
    if llm_config is None:
        llm_config = LLMConfig.from_config(config)
    return create_llm_client(llm_config)


def create_llm_client(llm_config: LLMConfig) -> Any:
    """
    Create LLM client for the configured provider.

    - ollama: local Ollama server through SimpleOllama
    - anything else: litellm (google/gemini, openai, anthropic, groq, deepseek, ...)

    See https://docs.litellm.ai/docs/providers for the full list.
    """
    if llm_config.provider_name == "ollama":
        return SimpleOllama(
            base_url=llm_config.base_url or "http://localhost:11434",
            model=llm_config.model_name,
            num_predict=llm_config.max_tokens,
            temperature=llm_config.temperature,
            timeout=llm_config.timeout,
        )
    llm_config.validate()
    return LiteLLMClient(llm_config)


class LiteLLMClient:
    """
    Universal LLM client using litellm.

    The API key is passed per call rather than exported to the environment.
    """

    def __init__(self, llm_config: LLMConfig):
        self.config = llm_config
        self.model = llm_config.litellm_model
        self.api_key = llm_config.resolved_api_token
        self.temperature = llm_config.temperature
        self.max_tokens = llm_config.max_tokens
        self.timeout = llm_config.timeout

    async def ainvoke(self, prompt: str) -> dict:
        """Async invoke the LLM, asking for a JSON object reply"""
        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                api_key=self.api_key,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"LiteLLM error for {self.model}: {e}")
            raise

        text = response.choices[0].message.content or ""
        return {"text": text}
