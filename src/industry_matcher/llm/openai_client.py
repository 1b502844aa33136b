from __future__ import annotations

import os
from typing import Any, Dict, Optional, Type

from openai import APIError, APITimeoutError, BadRequestError, OpenAI, RateLimitError
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from industry_matcher.exception import CustomException
from industry_matcher.llm.base import BaseLLM
from industry_matcher.logger import get_logger

logger = get_logger(__name__)


class OpenAIClient(BaseLLM):
    """
    Lightweight wrapper around the OpenAI Responses API with retry logic and optional
    structured (pydantic) output.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[OpenAI] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        llm_config: Optional[Dict[str, Any]] = None,
    ) -> None:
        llm_config = llm_config or {}

        super().__init__(
            model=model or llm_config.get("refinement_model", "gpt-4o-mini"),
            temperature=llm_config.get("temperature", 0.0) if temperature is None else temperature,
        )

        resolved_api_key = api_key or os.getenv("OPENAI_API_KEY")
        resolved_base_url = base_url or os.getenv("OPENAI_BASE_URL") or llm_config.get("base_url")
        resolved_timeout = timeout if timeout is not None else llm_config.get("request_timeout_seconds", 30.0)

        if client is None and not resolved_api_key:
            raise CustomException("OPENAI_API_KEY is not set in the environment.")

        self.client = client or OpenAI(
            api_key=resolved_api_key,
            base_url=resolved_base_url,
            timeout=resolved_timeout,
        )

    # ------------------------------------------------------------------
    def _complete(self, prompt: str, response_model: Optional[Type[BaseModel]]) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self.model,
            "input": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }

        try:
            logger.debug("Calling OpenAI with model=%s", request["model"])
            if response_model is not None:
                response = self._parse_with_retry(request=request, text_format=response_model)
                content = getattr(response, "output_parsed", None)
                if content is None:
                    content = getattr(response, "output_text", None)
            else:
                response = self._create_with_retry(request=request)
                content = getattr(response, "output_text", None) or str(response)
        except BadRequestError as exc:
            logger.error("OpenAI rejected the request: %s", exc)
            raise CustomException(exc)
        except Exception as exc:
            logger.error("OpenAI call failed: %s", exc)
            raise CustomException(exc)

        usage = getattr(response, "usage", None)
        return {
            "content": content,
            "raw_response": getattr(response, "output_text", None) or "",
            "prompt_tokens": getattr(usage, "input_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "output_tokens", 0) or 0,
            "total_tokens": getattr(usage, "total_tokens", 0) or 0,
            "metadata": {"response_id": getattr(response, "id", None)},
        }

    # ------------------------------------------------------------------
    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((APITimeoutError, RateLimitError, APIError)),
    )
    def _create_with_retry(self, *, request: Dict[str, Any]):
        """Issue the API request with exponential backoff on transient errors."""
        return self.client.responses.create(**request)

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((APITimeoutError, RateLimitError, APIError)),
    )
    def _parse_with_retry(self, *, request: Dict[str, Any], text_format: Type[BaseModel]):
        """Structured variant: the SDK validates the output against `text_format`."""
        return self.client.responses.parse(text_format=text_format, **request)
