"""Fast string-only relevance scoring of taxonomy entries against a query."""

import re
from typing import Iterable, List, Sequence

from industry_matcher.models import ScoredCandidate, TaxonomyEntry

MAX_LEXICAL_SCORE = 2.0

SUBSTRING_WEIGHT = 1.0
TOKEN_OVERLAP_WEIGHT = 0.5
KEYWORD_HIT_WEIGHT = 0.1
MAX_KEYWORD_HITS = 3
DESCRIPTION_OVERLAP_WEIGHT = 0.2

MIN_TOKEN_LENGTH = 3
MIN_SHARED_PREFIX = 3

_WORD = re.compile(r"\w+")


def normalize_query(text: str) -> str:
    return (text or "").strip().lower()


def tokenize(text: str) -> List[str]:
    """Lower-cased word tokens longer than 2 characters."""
    return [t for t in _WORD.findall((text or "").lower()) if len(t) >= MIN_TOKEN_LENGTH]


def _shared_prefix_length(a: str, b: str) -> int:
    n = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        n += 1
    return n


def tokens_match(a: str, b: str) -> bool:
    """Fuzzy token equality: containment either way or a shared prefix of 3+."""
    return a in b or b in a or _shared_prefix_length(a, b) >= MIN_SHARED_PREFIX


def overlap_ratio(query_tokens: Sequence[str], target_tokens: Iterable[str]) -> float:
    """Fraction of query tokens that fuzzily match any target token."""
    if not query_tokens:
        return 0.0
    targets = set(target_tokens)
    if not targets:
        return 0.0
    hits = sum(1 for q in query_tokens if any(tokens_match(q, t) for t in targets))
    return hits / len(query_tokens)


def keyword_hits(query: str, keywords: Iterable[str]) -> int:
    hits = 0
    for keyword in keywords:
        kw = keyword.strip().lower()
        if kw and (kw in query or query in kw):
            hits += 1
    return hits


def score_entry(query: str, entry: TaxonomyEntry) -> float:
    """
    Heuristic relevance of one entry for an already normalized query.

    Components, strongest first: full-query substring of the searchable text,
    fuzzy token overlap with the searchable text, keyword hits, and fuzzy
    token overlap with the description alone. Clamped to MAX_LEXICAL_SCORE.
    """
    if not query:
        return 0.0

    searchable = entry.searchable_text.lower()
    query_tokens = tokenize(query)

    score = 0.0
    if query in searchable:
        score += SUBSTRING_WEIGHT
    score += TOKEN_OVERLAP_WEIGHT * overlap_ratio(query_tokens, tokenize(searchable))
    score += KEYWORD_HIT_WEIGHT * min(keyword_hits(query, entry.keywords), MAX_KEYWORD_HITS)
    score += DESCRIPTION_OVERLAP_WEIGHT * overlap_ratio(query_tokens, tokenize(entry.description))

    return min(score, MAX_LEXICAL_SCORE)


def score_taxonomy(query: str, entries: Sequence[TaxonomyEntry]) -> List[ScoredCandidate]:
    """Score every entry, in taxonomy order."""
    query = normalize_query(query)
    return [ScoredCandidate(code=e.code, name=e.name, score=score_entry(query, e)) for e in entries]


def rank_candidates(
    scored: Sequence[ScoredCandidate],
    min_score: float,
    max_candidates: int,
) -> List[ScoredCandidate]:
    """
    Highest scores first (ties keep taxonomy order), thresholded and truncated.
    An empty list means no industry is relevant.
    """
    kept = [c for c in scored if c.score > 0 and c.score >= min_score]
    kept.sort(key=lambda c: c.score, reverse=True)
    return kept[: max(max_candidates, 0)]
