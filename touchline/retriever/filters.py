"""
Retrieval Filters

Builds vector-store metadata filters from extracted entities.
A schema maps EntityBag fields to the metadata field names a namespace
stores; entities without a schema entry are not filtered on.
"""

from typing import Dict, Any, Mapping

from .entities import EntityBag

RetrievalFilter = Dict[str, Dict[str, Any]]

DEFAULT_MINUTE_WINDOW = 5

# EntityBag field -> stored metadata field
MATCH_FILTER_SCHEMA: Mapping[str, str] = {
    "player": "player",
    "team": "team",
    "opponent": "opponent",
    "minute": "minute",
}

CLUB_FILTER_SCHEMA: Mapping[str, str] = {
    "player": "player_name",
    "team": "team",
    "topic": "topic",
}

NO_FILTER: Mapping[str, str] = {}


def build_filter(
    entities: EntityBag,
    schema: Mapping[str, str],
    minute_window: int = DEFAULT_MINUTE_WINDOW,
) -> RetrievalFilter:
    """
    Build a Pinecone metadata filter.

    Present fields become equality predicates; the minute becomes an
    inclusive range of +/- minute_window (floored at 0).

    Args:
        entities: Extracted entities
        schema: Entity field -> metadata field mapping for the target namespace
        minute_window: Minute tolerance

    Returns:
        Filter dict; empty means unfiltered
    """
    result: RetrievalFilter = {}

    for entity_field, store_field in schema.items():
        value = getattr(entities, entity_field, None)
        if value is None:
            continue

        if entity_field == "minute":
            result[store_field] = {
                "$gte": max(0, value - minute_window),
                "$lte": value + minute_window,
            }
        else:
            result[store_field] = {"$eq": value}

    return result
