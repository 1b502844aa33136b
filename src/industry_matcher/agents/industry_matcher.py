import os
import threading
from concurrent.futures import Future
from typing import Any, Dict, List, Optional

import numpy as np

from industry_matcher.agents.refiner import CandidateRefiner
from industry_matcher.dbs.faiss_store import FaissStore
from industry_matcher.dbs.taxonomy_db import TaxonomyDB
from industry_matcher.exception import CustomException
from industry_matcher.llm.openai_client import OpenAIClient
from industry_matcher.logger import get_logger
from industry_matcher.models import MatchResult, ScoredCandidate, StageOutcome
from industry_matcher.scoring.lexical import normalize_query, rank_candidates, score_taxonomy
from industry_matcher.utils.embed_texts import Embedder, SentenceTransformerEmbedder
from industry_matcher.utils.load_config import load_config_file
from industry_matcher.utils.timeout import call_with_timeout, start_in_background, wait_for

logger = get_logger(__name__)

STRATEGY_REFINE = "refine"
STRATEGY_EMBEDDING = "embedding"

MATCHER_DEFAULTS: Dict[str, Any] = {
    "strategy": STRATEGY_REFINE,
    "max_results": 8,
    "max_candidates": 12,
    "candidate_min_score": 0.3,
    "lexical_only_min_score": 0.6,
    "similarity_threshold": 0.3,
    "refine_skip_max_candidates": 3,
    "refine_skip_top_score": 1.5,
    "min_relevance": 5,
    "refine_timeout_seconds": 20.0,
    "embedding_timeout_seconds": 30.0,
}


class IndustryMatcher:
    """
    Converts a free-text industry description into ranked industry codes.

    Pipeline:
    1. Lexical scoring of every taxonomy entry
    2. Threshold + truncate to a candidate shortlist
    3. Optional semantic stage, selected by `matcher.strategy`:
       - "refine": LLM picks and re-ranks from the shortlist
       - "embedding": cosine similarity against cached entry embeddings
    4. Fallback to the lexical ranking whenever the semantic stage degrades
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        taxonomy_db: Optional[TaxonomyDB] = None,
        embedder: Optional[Embedder] = None,
        llm_client=None,
    ):
        if config is None:
            config = self._load_config()

        settings = dict(MATCHER_DEFAULTS)
        settings.update(config.get("matcher") or {})
        self.settings = settings

        self.strategy = settings["strategy"]
        if self.strategy not in (STRATEGY_REFINE, STRATEGY_EMBEDDING):
            raise CustomException(f"Unknown matcher strategy '{self.strategy}'")

        self.max_results = int(settings["max_results"])
        self.max_candidates = int(settings["max_candidates"])

        # Fatal if neither dataset can be loaded
        if taxonomy_db is None:
            taxonomy_config = config.get("taxonomy") or {}
            taxonomy_db = TaxonomyDB(
                enriched_path=taxonomy_config.get("enriched_path"),
                basic_path=taxonomy_config.get("basic_path"),
            )
        self.taxonomy_db = taxonomy_db

        self.embedder = embedder
        self.llm_client = llm_client
        self.refiner = None
        if llm_client is not None:
            self.refiner = CandidateRefiner(
                llm_client,
                skip_max_candidates=int(settings["refine_skip_max_candidates"]),
                skip_top_score=float(settings["refine_skip_top_score"]),
                min_relevance=int(settings["min_relevance"]),
                timeout_seconds=settings["refine_timeout_seconds"],
            )

        # Embedding cache, owned by this instance and written once
        self._embedding_lock = threading.Lock()
        self._embedding_index: Optional[FaissStore] = None
        self._population: Optional[Future] = None

        logger.info(
            f"IndustryMatcher initialized: strategy={self.strategy}, "
            f"{len(self.taxonomy_db)} industries, "
            f"semantic stage {'enabled' if self._semantic_available() else 'disabled'}."
        )

    @staticmethod
    def _load_config() -> Dict[str, Any]:
        try:
            return load_config_file()
        except FileNotFoundError:
            logger.warning("config.yaml not found, using built-in matcher defaults.")
            return {}

    def _semantic_available(self) -> bool:
        if self.strategy == STRATEGY_EMBEDDING:
            return self.embedder is not None
        return self.refiner is not None

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    def match_industries(self, industry_description: str) -> List[str]:
        """
        Main matching method: industry description -> ordered industry codes.
        """
        return self.match(industry_description).codes

    def match(self, industry_description: str) -> MatchResult:
        """
        Runs the full pipeline and keeps scores for inspection.
        Never raises; failures yield an empty result.
        """
        query = normalize_query(industry_description)
        if not query:
            return MatchResult(query="")

        logger.info(f"Matching industry description: '{query}'")
        try:
            if self.strategy == STRATEGY_EMBEDDING and self.embedder is not None:
                result = self._match_by_embedding(query)
            elif self.strategy == STRATEGY_REFINE and self.refiner is not None:
                result = self._match_with_refinement(query)
            else:
                result = self._lexical_result(query, float(self.settings["lexical_only_min_score"]))
        except Exception as e:
            logger.error(f"Industry matching failed for '{query}': {e}", exc_info=True)
            return MatchResult(query=query, degraded_reason=f"matching failed: {e}")

        if result.matches:
            top = ", ".join(f"{m.code} ({m.score:.3f})" for m in result.matches[:3])
            logger.info(f"Found {len(result.matches)} matches via {result.stage}. Top: {top}")
        else:
            logger.info(f"No relevant industries found for '{query}'")
        return result

    def get_industry_name(self, code: str) -> str:
        """Get industry name by code (for debugging/logging)."""
        return self.taxonomy_db.get_name(code)

    # ----------------------------------------------------------------------
    # LEXICAL
    # ----------------------------------------------------------------------
    def _lexical_candidates(self, query: str, min_score: float) -> List[ScoredCandidate]:
        scored = score_taxonomy(query, self.taxonomy_db.entries)
        return rank_candidates(scored, min_score=min_score, max_candidates=self.max_candidates)

    def _lexical_result(self, query: str, min_score: float, degraded_reason: Optional[str] = None) -> MatchResult:
        candidates = self._lexical_candidates(query, min_score)
        return MatchResult(
            query=query,
            matches=candidates[: self.max_results],
            stage="lexical",
            degraded_reason=degraded_reason,
        )

    # ----------------------------------------------------------------------
    # REFINE STRATEGY
    # ----------------------------------------------------------------------
    def _match_with_refinement(self, query: str) -> MatchResult:
        candidates = self._lexical_candidates(query, float(self.settings["candidate_min_score"]))
        if not candidates:
            return MatchResult(query=query, stage="lexical")

        if self.refiner.should_skip(candidates):
            # No re-ranking will rescue weak matches, so the keyword-only cutoff applies
            logger.info("Shortlist is small or confident, skipping LLM refinement.")
            strict_min = float(self.settings["lexical_only_min_score"])
            confident = [c for c in candidates if c.score >= strict_min]
            return MatchResult(query=query, matches=confident[: self.max_results], stage="lexical")

        outcome = self.refiner.refine(query, candidates)
        if not outcome.ok:
            logger.warning(f"Refinement degraded ({outcome.degraded_reason}), using keyword ranking.")
            return MatchResult(
                query=query,
                matches=candidates[: self.max_results],
                stage="lexical",
                degraded_reason=outcome.degraded_reason,
            )

        return MatchResult(query=query, matches=outcome.value[: self.max_results], stage="refined")

    # ----------------------------------------------------------------------
    # EMBEDDING STRATEGY
    # ----------------------------------------------------------------------
    def ensure_embeddings(self) -> FaissStore:
        """
        Embeds every taxonomy entry in one batch and builds the in-memory index.
        Idempotent; concurrent callers wait for the same population.

        A population that outlives the timeout keeps running in the background
        and later callers wait on it instead of starting another batch. Only a
        failed population is started again.
        """
        if self._embedding_index is not None:
            return self._embedding_index

        with self._embedding_lock:
            if self._embedding_index is not None:
                return self._embedding_index

            population = self._population
            if population is None or (population.done() and population.exception() is not None):
                texts = self.taxonomy_db.searchable_texts()
                logger.info(f"Generating embeddings for {len(texts)} industry codes...")
                population = start_in_background(self._build_embedding_index, texts)
                self._population = population
            else:
                logger.info("Embedding population already running, waiting for it.")

        return wait_for(population, self.settings["embedding_timeout_seconds"], label="Embedding population")

    def _build_embedding_index(self, texts: List[str]) -> FaissStore:
        vectors = np.asarray(self.embedder.embed_many(texts), dtype="float32")
        if vectors.ndim != 2 or vectors.shape[0] != len(texts):
            raise CustomException(
                f"Embedding count mismatch: expected {len(texts)} rows, got shape {vectors.shape}"
            )

        store = FaissStore()
        store.build_index(vectors)
        self._embedding_index = store
        logger.info(f"Generated embeddings for {len(texts)} industries")
        return store

    def _semantic_scores(self, query: str) -> StageOutcome[List[ScoredCandidate]]:
        try:
            store = self.ensure_embeddings()
            query_vector = call_with_timeout(
                self.embedder.embed,
                self.settings["embedding_timeout_seconds"],
                query,
            )
            idxs, similarities = store.search(query_vector, k=len(self.taxonomy_db))
        except Exception as e:
            logger.warning(f"Embedding stage failed: {e}")
            return StageOutcome.degraded(f"embedding failed: {e}")

        threshold = float(self.settings["similarity_threshold"])
        entries = self.taxonomy_db.entries
        matches = [
            ScoredCandidate(code=entries[i].code, name=entries[i].name, score=float(sim))
            for i, sim in zip(idxs, similarities)
            if i >= 0 and float(sim) > threshold
        ]
        return StageOutcome.success(matches[: self.max_results])

    def _match_by_embedding(self, query: str) -> MatchResult:
        outcome = self._semantic_scores(query)
        if not outcome.ok:
            return self._lexical_result(
                query,
                float(self.settings["lexical_only_min_score"]),
                degraded_reason=outcome.degraded_reason,
            )
        return MatchResult(query=query, matches=outcome.value, stage="embedding")


def build_default_matcher(config: Optional[Dict[str, Any]] = None) -> IndustryMatcher:
    """
    Wires the configured capabilities: a local SentenceTransformer for the
    embedding strategy, or an OpenAI client for refinement when a key is set.
    """
    if config is None:
        config = IndustryMatcher._load_config()
    strategy = (config.get("matcher") or {}).get("strategy", STRATEGY_REFINE)
    llm_config = config.get("llm") or {}

    embedder = None
    llm_client = None
    if strategy == STRATEGY_EMBEDDING:
        embedder = SentenceTransformerEmbedder(llm_config.get("embedding_model"))
    elif os.getenv("OPENAI_API_KEY"):
        llm_client = OpenAIClient(llm_config=llm_config)
    else:
        logger.warning("OPENAI_API_KEY is not set. Industry matching runs on keywords only.")

    return IndustryMatcher(config=config, embedder=embedder, llm_client=llm_client)
