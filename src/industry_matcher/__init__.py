from industry_matcher.agents.industry_matcher import IndustryMatcher, build_default_matcher
from industry_matcher.dbs.taxonomy_db import TaxonomyDB
from industry_matcher.models import MatchResult, TaxonomyEntry

__all__ = ["IndustryMatcher", "TaxonomyDB", "TaxonomyEntry", "MatchResult", "build_default_matcher"]
