from .lexical import (
    MAX_LEXICAL_SCORE,
    normalize_query,
    rank_candidates,
    score_entry,
    score_taxonomy,
    tokenize,
)
