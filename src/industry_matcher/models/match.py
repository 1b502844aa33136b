from typing import List, Optional
from pydantic import BaseModel, Field

class ScoredCandidate(BaseModel):
    code: str
    name: str
    score: float = Field(..., description="Stage-specific relevance score, higher is better")

class MatchResult(BaseModel):
    """
    Internal result of one match call. Only `codes` leaves the matcher.
    """
    query: str
    matches: List[ScoredCandidate] = Field(default_factory=list)
    stage: str = Field("empty", description="Stage that produced the ranking: empty, lexical, refined or embedding")
    degraded_reason: Optional[str] = Field(None, description="Why a semantic stage fell back, if it did")

    @property
    def codes(self) -> List[str]:
        return [m.code for m in self.matches]
