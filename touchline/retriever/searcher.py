"""
Vector Searcher

Semantic search over one Pinecone namespace.
Embeds the query, runs a filtered top-k query, and normalizes every match
into a RawResult before it leaves this module.
"""

import asyncio
import json
import logging
from typing import List, Dict, Any, Optional

from .results import RawResult, SearchOutcome

logger = logging.getLogger("touchline.retriever.searcher")

# Metadata fields that may hold the chunk text, in preference order
TEXT_FIELDS = ("text", "chunk_text", "content", "field_text", "raw")

MEDIA_FIELDS = ("media_url", "image_url", "video_url")


class VectorSearcher:
    """
    Searches the vector store.

    Failure policy: embedding and store errors become a failed
    SearchOutcome; search() collapses that to an empty list.
    """

    def __init__(
        self,
        vector_store,
        embedding_service,
        default_top_k: int = 5,
    ):
        """
        Initialize searcher.

        Args:
            vector_store: PineconeClient (or a fake with the same query())
            embedding_service: For embedding queries
            default_top_k: Result count when the caller does not set one
        """
        self._store = vector_store
        self._embedding = embedding_service
        self._default_top_k = default_top_k

    async def search(
        self,
        query: str,
        namespace: str,
        filter: Optional[Dict[str, Any]] = None,
        top_k: Optional[int] = None,
    ) -> List[RawResult]:
        """Search a namespace; any failure yields an empty list."""
        outcome = await self.try_search(query, namespace, filter=filter, top_k=top_k)
        return outcome.results_or_empty()

    async def try_search(
        self,
        query: str,
        namespace: str,
        filter: Optional[Dict[str, Any]] = None,
        top_k: Optional[int] = None,
    ) -> SearchOutcome:
        """
        Search a namespace.

        Args:
            query: Query text (already enhanced, if at all)
            namespace: Vector store namespace
            filter: Optional metadata filter; empty means unfiltered
            top_k: Number of results (default from constructor)

        Returns:
            SearchOutcome with normalized results, or the failure
        """
        source = f"vector:{namespace}"
        top_k = top_k or self._default_top_k

        try:
            vector = await asyncio.to_thread(self._embedding.embed_single, query)
            raw = await asyncio.to_thread(
                self._store.query,
                namespace,
                vector,
                top_k,
                filter or None,
            )
        except Exception as e:
            return SearchOutcome.failure(source, e)

        if not raw.get("ok"):
            return SearchOutcome.failure(source, raw.get("error", "vector query failed"))

        results = [self._to_raw_result(m) for m in raw.get("results", [])]
        logger.debug("%s returned %d results (filter=%s)", source, len(results), filter)
        return SearchOutcome.success(source, results)

    def _to_raw_result(self, match: Dict[str, Any]) -> RawResult:
        """Convert a store match to RawResult"""
        metadata = match.get("metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {"raw": str(metadata)}

        text = ""
        for name in TEXT_FIELDS:
            value = metadata.get(name)
            if isinstance(value, str) and value.strip():
                text = value
                break

        # No text field: show the metadata itself rather than nothing
        if not text:
            text = json.dumps(metadata, default=str)

        media_url = None
        for name in MEDIA_FIELDS:
            if metadata.get(name):
                media_url = str(metadata[name])
                break

        score = match.get("score")
        try:
            score = float(score) if score is not None else 0.0
        except (TypeError, ValueError):
            score = 0.0

        return RawResult(
            text=text,
            source="vector",
            score=score,
            id=match.get("id"),
            title=str(metadata.get("title", "")),
            url=str(metadata.get("source_url", "")),
            media_url=media_url,
            metadata=metadata,
        )
