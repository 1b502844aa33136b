from typing import Any, Dict
from pydantic import BaseModel, Field

class LLMResponse(BaseModel):
    """
    Provider-neutral result of one generative call.
    `content` is the parsed response model when one was requested, otherwise text.
    """
    content: Any
    raw_response: str
    model_name: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    latency_ms: float = 0.0
    provider: str
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Request details, e.g. response_model and the provider's response id"
    )
