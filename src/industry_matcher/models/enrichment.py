from typing import List
from pydantic import BaseModel, Field

class EnrichedCode(BaseModel):
    code: str = Field(..., description="Exact code from the input list")
    name: str = Field(..., description="Exact name from the input list")
    description: str = Field(..., description="Clear English description of this industry/business type")
    keywords: List[str] = Field(..., description="3-5 English search terms")

class EnrichmentBatch(BaseModel):
    """
    Structured LLM response for one batch of industry codes.
    """
    enriched: List[EnrichedCode]
