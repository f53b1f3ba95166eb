"""
Web Searcher

Live web/news search for questions the vector store cannot answer
(live matches, recent results, fan reactions).
"""

import asyncio
import logging
from typing import List, Dict, Any, Optional

from .query_enhancer import enhance
from .results import RawResult, SearchOutcome

logger = logging.getLogger("touchline.retriever.web_searcher")


class WebSearcher:
    """Searches the web and truncates hits to a fixed character budget."""

    def __init__(
        self,
        web_client,
        num_results: int = 5,
        snippet_chars: int = 500,
        content_chars: int = 1000,
    ):
        """
        Initialize web searcher.

        Args:
            web_client: ExaClient (or a fake with the same search())
            num_results: Result cap per search
            snippet_chars: Snippet length
            content_chars: Full-content length
        """
        self._client = web_client
        self._num_results = num_results
        self._snippet_chars = snippet_chars
        self._content_chars = content_chars

    async def search(self, query: str, search_type: Optional[str] = None) -> List[RawResult]:
        """Search the web; any failure yields an empty list."""
        outcome = await self.try_search(query, search_type)
        return outcome.results_or_empty()

    async def try_search(self, query: str, search_type: Optional[str] = None) -> SearchOutcome:
        """
        Search the web.

        Args:
            query: Base query
            search_type: Enhancement hint ("tactics", "fan_conversation", "live", "previous")

        Returns:
            SearchOutcome with normalized results, or the failure
        """
        source = f"web:{search_type or 'default'}"
        enhanced = enhance(query, search_type)

        try:
            raw = await asyncio.to_thread(self._client.search, enhanced, self._num_results)
        except Exception as e:
            return SearchOutcome.failure(source, e)

        if not raw.get("ok"):
            return SearchOutcome.failure(source, raw.get("error", "web search failed"))

        hits = raw.get("results", [])[: self._num_results]
        results = [self._to_raw_result(h) for h in hits]
        logger.debug("%s returned %d results for %r", source, len(results), enhanced)
        return SearchOutcome.success(source, results)

    def _to_raw_result(self, hit: Dict[str, Any]) -> RawResult:
        """Convert a web hit to RawResult"""
        text = hit.get("text") or ""
        published = hit.get("published_date")

        return RawResult(
            text=text[: self._snippet_chars],
            source="web",
            score=None,
            title=hit.get("title") or "",
            url=hit.get("url") or "",
            content=text[: self._content_chars],
            published_date=str(published) if published else None,
            media_url=hit.get("image") or None,
        )
