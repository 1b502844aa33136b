from typing import List
from pydantic import BaseModel, Field

class RankedIndustry(BaseModel):
    code: str = Field(..., description="Industry code copied exactly from the candidate list")
    relevance: int = Field(..., ge=1, le=10, description="How well the industry fits the description, 1-10")

class RefinementResponse(BaseModel):
    """
    Model for structured LLM response during the refinement step.
    """
    matches: List[RankedIndustry] = Field(default_factory=list, description="Relevant candidates, most relevant first")
