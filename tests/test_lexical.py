import pytest
from industry_matcher.models import ScoredCandidate, TaxonomyEntry
from industry_matcher.scoring.lexical import (
    MAX_LEXICAL_SCORE,
    overlap_ratio,
    rank_candidates,
    score_entry,
    score_taxonomy,
    tokenize,
    tokens_match,
)


@pytest.fixture
def entries():
    return [
        TaxonomyEntry(code="A", name="Software development", description="Building software products",
                      keywords=["software", "programming", "developer"]),
        TaxonomyEntry(code="B", name="Web development", description="Building websites", keywords=["websites", "web design"]),
        TaxonomyEntry(code="C", name="Restaurants", description="Serving meals", keywords=["restaurant", "dining"]),
    ]


def test_tokenize_drops_short_tokens_and_punctuation():
    assert tokenize("Software development / SaaS, IT") == ["software", "development", "saas"]


def test_tokens_match_rules():
    assert tokens_match("dev", "development")        # contained
    assert tokens_match("development", "develop")    # contains
    assert tokens_match("developer", "development")  # shared prefix
    assert not tokens_match("software", "hardware")


def test_overlap_ratio_without_query_tokens_is_zero():
    assert overlap_ratio([], ["software"]) == 0.0
    assert overlap_ratio(["software"], []) == 0.0


def test_exact_substring_scores_highest(entries):
    scores = {c.code: c.score for c in score_taxonomy("Software development", entries)}
    assert scores["A"] > scores["B"] > scores["C"]
    assert scores["A"] >= 1.0
    assert scores["C"] == 0.0


def test_scores_are_clamped(entries):
    rich = TaxonomyEntry(
        code="X",
        name="software",
        description="software software",
        keywords=["software", "soft", "ware", "oftwar", "softw"],
    )
    assert score_entry("software", rich) <= MAX_LEXICAL_SCORE


def test_short_word_query_has_no_overlap_terms(entries):
    # "it" and "ai" are too short to tokenize; only substring/keyword terms apply
    assert score_entry("it", entries[2]) == 0.0


def test_scoring_is_deterministic(entries):
    first = score_taxonomy("web software developer", entries)
    second = score_taxonomy("web software developer", entries)
    assert [c.score for c in first] == [c.score for c in second]
    assert [c.code for c in first] == ["A", "B", "C"]


def test_rank_candidates_filters_sorts_and_truncates():
    scored = [
        ScoredCandidate(code="A", name="a", score=0.4),
        ScoredCandidate(code="B", name="b", score=0.9),
        ScoredCandidate(code="C", name="c", score=0.1),
        ScoredCandidate(code="D", name="d", score=0.4),
    ]
    ranked = rank_candidates(scored, min_score=0.3, max_candidates=2)
    assert [c.code for c in ranked] == ["B", "A"]

    ranked = rank_candidates(scored, min_score=0.3, max_candidates=10)
    assert [c.code for c in ranked] == ["B", "A", "D"]


def test_rank_candidates_can_be_empty():
    scored = [ScoredCandidate(code="A", name="a", score=0.0)]
    assert rank_candidates(scored, min_score=0.0, max_candidates=5) == []
