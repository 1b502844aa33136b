import json
from typing import List, Optional, Sequence

from pydantic import ValidationError

from industry_matcher.logger import get_logger
from industry_matcher.models import RefinementResponse, ScoredCandidate, StageOutcome
from industry_matcher.utils.timeout import call_with_timeout

logger = get_logger(__name__)

REFINEMENT_PROMPT = """
You are an expert in Swedish industry classification codes.
A user is searching for companies in this industry: "{query}"

Below is a shortlist of candidate industry codes found by keyword matching,
with their names and a rough keyword score:

{candidates_text}

Instructions:
1. Select the candidates that genuinely describe the industry the user is looking for.
2. Rate each selected candidate's relevance from 1 (barely related) to 10 (exact fit).
3. Order the selected candidates from most to least relevant.
4. Only use codes exactly as written in the shortlist. Never invent codes.
5. Leave out candidates that are not relevant.
"""


class CandidateRefiner:
    """
    Asks a generative model to pick and re-rank industries from a heuristic
    shortlist. Any failure yields a degraded outcome; the caller keeps the
    heuristic ranking.
    """

    def __init__(
        self,
        llm_client,
        skip_max_candidates: int = 3,
        skip_top_score: float = 1.5,
        min_relevance: int = 5,
        timeout_seconds: Optional[float] = 20.0,
    ):
        self.llm_client = llm_client
        self.skip_max_candidates = skip_max_candidates
        self.skip_top_score = skip_top_score
        self.min_relevance = min_relevance
        self.timeout_seconds = timeout_seconds

    def should_skip(self, candidates: Sequence[ScoredCandidate]) -> bool:
        """Refining a short or already confident shortlist is not worth a model call."""
        if len(candidates) <= self.skip_max_candidates:
            return True
        return candidates[0].score >= self.skip_top_score

    def refine(self, query: str, candidates: Sequence[ScoredCandidate]) -> StageOutcome[List[ScoredCandidate]]:
        if not candidates:
            return StageOutcome.degraded("no candidates to refine")

        prompt = self.build_prompt(query, candidates)
        try:
            response = call_with_timeout(
                self.llm_client.generate,
                self.timeout_seconds,
                prompt=prompt,
                response_model=RefinementResponse,
            )
        except Exception as e:
            logger.warning(f"Industry refinement call failed: {e}")
            return StageOutcome.degraded(f"llm call failed: {e}")

        parsed = self._parse(getattr(response, "content", None))
        if parsed is None:
            return StageOutcome.degraded("unparseable refinement response")

        return self._validate(parsed, candidates)

    @staticmethod
    def build_prompt(query: str, candidates: Sequence[ScoredCandidate]) -> str:
        candidates_text = "\n".join(
            f"- Code: {c.code} | Name: {c.name} | Keyword score: {c.score:.2f}" for c in candidates
        )
        return REFINEMENT_PROMPT.format(query=query, candidates_text=candidates_text)

    @staticmethod
    def _parse(content) -> Optional[RefinementResponse]:
        if isinstance(content, RefinementResponse):
            return content
        try:
            if isinstance(content, str):
                logger.warning("LLM returned string instead of object. Attempting manual parse.")
                return RefinementResponse.model_validate(json.loads(content))
            if isinstance(content, dict):
                return RefinementResponse.model_validate(content)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Could not parse refinement response: {e}")
            return None

        logger.warning(f"Unexpected refinement content type: {type(content)}")
        return None

    def _validate(
        self, parsed: RefinementResponse, candidates: Sequence[ScoredCandidate]
    ) -> StageOutcome[List[ScoredCandidate]]:
        by_code = {c.code: c for c in candidates}
        position = {c.code: i for i, c in enumerate(candidates)}

        foreign = [m.code for m in parsed.matches if m.code.strip() not in by_code]
        if foreign:
            logger.warning(f"LLM returned codes outside the shortlist: {foreign}")
            return StageOutcome.degraded(f"codes outside candidate set: {foreign}")

        chosen = {}
        for match in parsed.matches:
            code = match.code.strip()
            if match.relevance < self.min_relevance or code in chosen:
                continue
            chosen[code] = match.relevance

        if not chosen:
            return StageOutcome.degraded("no candidate met the relevance threshold")

        ranked = sorted(chosen.items(), key=lambda kv: (-kv[1], position[kv[0]]))
        refined = [
            ScoredCandidate(code=code, name=by_code[code].name, score=relevance / 10.0)
            for code, relevance in ranked
        ]
        logger.info(f"LLM refined {len(candidates)} candidates to {len(refined)}")
        return StageOutcome.success(refined)
