"""
Exa Client

Thin wrapper over the Exa SDK for live web and news search.
Every call returns a result dict with ok/error status instead of raising.
"""

import logging
from typing import List, Dict, Any, Optional

logger = logging.getLogger("touchline.common.web_search")


class ExaClient:
    """Live web search with full-text content retrieval."""

    def __init__(self, api_key: Optional[str] = None, client=None):
        """
        Initialize Exa client.

        Args:
            api_key: Exa API key
            client: Pre-built Exa SDK client (skips construction)
        """
        self._api_key = api_key
        self._client = client

    def _ensure_initialized(self) -> None:
        """Lazily initialize the SDK client"""
        if self._client is not None:
            return

        if not self._api_key:
            raise RuntimeError("EXA_API_KEY is not set")

        try:
            from exa_py import Exa
        except ImportError as e:
            raise RuntimeError(f"exa-py package not installed: {e}")

        self._client = Exa(api_key=self._api_key)

    @property
    def is_available(self) -> bool:
        try:
            self._ensure_initialized()
            return True
        except Exception:
            return False

    def search(self, query: str, num_results: int = 5) -> Dict[str, Any]:
        """
        Search the web and fetch page text for each hit.

        Args:
            query: Search query
            num_results: Result cap

        Returns:
            {"ok": True, "results": [{"title", "url", "text", "published_date", "image"}, ...]}
            or {"ok": False, "error": str}
        """
        try:
            self._ensure_initialized()
            response = self._client.search_and_contents(
                query,
                num_results=num_results,
                text=True,
            )
            return {"ok": True, "results": self.parse_results(response)}

        except Exception as e:
            logger.debug("Exa search failed: %s", e)
            return {"ok": False, "error": str(e)}

    def parse_results(self, response: Any) -> List[Dict[str, Any]]:
        """Convert an SDK search response into plain dicts."""
        if isinstance(response, dict):
            hits = response.get("results") or []
        else:
            hits = getattr(response, "results", None) or []

        def _field(hit, name):
            if isinstance(hit, dict):
                return hit.get(name)
            return getattr(hit, name, None)

        return [
            {
                "title": _field(hit, "title") or "",
                "url": _field(hit, "url") or "",
                "text": _field(hit, "text") or "",
                "published_date": _field(hit, "published_date"),
                "image": _field(hit, "image"),
            }
            for hit in hits
        ]
