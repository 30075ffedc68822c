"""
Relevance scoring for free-text search.
"""

from typing import Iterable, Optional

EXACT_MATCH_SCORE = 100
PREFIX_MATCH_SCORE = 50
SUBSTRING_MATCH_SCORE = 25
WORD_MATCH_SCORE = 10


def score_relevance(query: str, values: Iterable[Optional[str]]) -> int:
    """
    Score how well a record's searchable values match a query.

    Each non-null value contributes its best tier (exact, prefix, substring,
    word); contributions are summed across values without capping.

    Args:
        query: Free-text search query
        values: Searchable field values of one record

    Returns:
        Additive relevance score
    """
    term = query.lower()
    score = 0

    for value in values:
        if value is None:
            continue
        text = str(value).lower()

        if text == term:
            score += EXACT_MATCH_SCORE
        elif text.startswith(term):
            score += PREFIX_MATCH_SCORE
        elif term in text:
            score += SUBSTRING_MATCH_SCORE
        elif any(term in word for word in text.split()):
            score += WORD_MATCH_SCORE

    return score
