import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from industry_matcher.logger import get_logger
from industry_matcher.models.llm import LLMResponse

logger = get_logger(__name__)


class BaseLLM(ABC):
    """
    Provider-neutral generative client. Subclasses implement `_complete`;
    callers only ever use `generate`.
    """

    provider_name: str = "base"

    def __init__(self, model: str, temperature: float = 0.0):
        self.model = model
        self.temperature = temperature

    @abstractmethod
    def _complete(self, prompt: str, response_model: Optional[Type[BaseModel]]) -> Dict[str, Any]:
        """
        Returns a dict with keys: content, raw_response and optionally
        prompt_tokens, completion_tokens, total_tokens, metadata.
        """

    def generate(self, prompt: str, response_model: Optional[Type[BaseModel]] = None) -> LLMResponse:
        """
        Send a prompt and wrap the provider output in an LLMResponse.

        Args:
            prompt: User prompt to send to the model.
            response_model: Optional pydantic model the output must be parsed into.
        """
        start = time.perf_counter()
        result = self._complete(prompt, response_model)
        latency_ms = (time.perf_counter() - start) * 1000

        response = LLMResponse(
            content=result.get("content"),
            raw_response=result.get("raw_response", ""),
            model_name=self.model,
            prompt_tokens=result.get("prompt_tokens", 0),
            completion_tokens=result.get("completion_tokens", 0),
            total_tokens=result.get("total_tokens", 0),
            latency_ms=latency_ms,
            provider=self.__class__.__name__,
            metadata={
                "response_model": response_model.__name__ if response_model is not None else None,
                "temperature": self.temperature,
                **(result.get("metadata") or {}),
            },
        )
        logger.info(
            f"{response.provider} [{self.model}] answered in {latency_ms:.0f} ms "
            f"({response.total_tokens} tokens)"
        )
        return response
