"""
Query Enhancer

Appends domain phrases to a search query to improve recall for a given
search type. The original query text is always kept as the prefix.
"""

from typing import Optional

PHRASE_BANK = {
    "tactics": "football explanation tactics explained soccer tactics",
    "fan_conversation": "reddit twitter reactions fan opinions live reactions",
    "live": "live score match updates minute by minute commentary",
    "previous": "match report result highlights post-match analysis",
}

# Alternate hint names used by some dispatch plans
HINT_ALIASES = {
    "fan_reaction": "fan_conversation",
    "live_match": "live",
    "previous_match": "previous",
}


def enhance(query: str, hint: Optional[str] = None) -> str:
    """
    Enhance a query for a search type.

    Args:
        query: Base query
        hint: Search type ("tactics", "fan_conversation", "live", "previous")

    Returns:
        The query with the hint's phrases appended, or unchanged when the
        hint is missing or unknown
    """
    if not hint:
        return query

    phrases = PHRASE_BANK.get(HINT_ALIASES.get(hint, hint))
    if not phrases:
        return query

    base = query.strip()
    return f"{base} {phrases}" if base else phrases
