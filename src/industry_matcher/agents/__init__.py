from industry_matcher.agents.industry_matcher import IndustryMatcher, build_default_matcher
from industry_matcher.agents.refiner import CandidateRefiner

__all__ = ["IndustryMatcher", "CandidateRefiner", "build_default_matcher"]
