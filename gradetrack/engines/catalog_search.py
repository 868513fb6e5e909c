"""
Catalog Search.

Heuristic autocomplete over the static course catalog.

SCORING (case-insensitive, query trimmed):
------------------------------------------
Code, first rule that matches:   exact +100, prefix +80, substring +60
Name, first rule that matches:   exact +90, prefix +70,
                                 word start (" " + query) +50, substring +40
Token bonus: for every query token of 2+ characters and every word of the
name, +20 if the word starts with the token, else +10 if it contains it.
These stack across words and tokens.

Items scoring 0 are dropped. Ties keep catalog order (sorted() is stable).
"""

from ..config import SEARCH_MIN_TOKEN_LENGTH, SEARCH_RESULT_LIMIT
from ..models import CatalogItem


def score_item(query: str, item: CatalogItem) -> int:
    """Relevance of one catalog item; ``query`` must already be lowercased and trimmed."""
    code = item.code.lower()
    name = item.name.lower()
    score = 0

    if code == query:
        score += 100
    elif code.startswith(query):
        score += 80
    elif query in code:
        score += 60

    if name == query:
        score += 90
    elif name.startswith(query):
        score += 70
    elif f" {query}" in name:
        score += 50
    elif query in name:
        score += 40

    name_words = name.split()
    for token in query.split():
        if len(token) < SEARCH_MIN_TOKEN_LENGTH:
            continue
        for word in name_words:
            if word.startswith(token):
                score += 20
            elif token in word:
                score += 10

    return score


def search_catalog(query: str, catalog, limit: int = SEARCH_RESULT_LIMIT) -> list:
    """
    Best catalog matches for ``query``, most relevant first.

    Returns at most ``limit`` CatalogItem objects; an empty or
    whitespace-only query returns an empty list.
    """
    query = (query or "").strip().lower()
    if not query:
        return []

    scored = [(score_item(query, item), item) for item in catalog]
    matches = [pair for pair in scored if pair[0] > 0]
    matches = sorted(matches, key=lambda pair: pair[0], reverse=True)
    return [item for _, item in matches[:limit]]
