from industry_matcher.llm.base import BaseLLM
from industry_matcher.llm.openai_client import OpenAIClient

__all__ = ["BaseLLM", "OpenAIClient"]
