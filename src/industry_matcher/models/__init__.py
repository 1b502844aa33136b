from .taxonomy import TaxonomyEntry
from .match import ScoredCandidate, MatchResult
from .refinement import RankedIndustry, RefinementResponse
from .llm import LLMResponse
from .stage_outcome import StageOutcome
from .enrichment import EnrichedCode, EnrichmentBatch
