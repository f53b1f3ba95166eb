"""
Pinecone Client

Thin wrapper over the Pinecone SDK for namespaced similarity queries.
Every call returns a result dict with ok/error status instead of raising.
"""

import json
import logging
from typing import List, Dict, Any, Optional

logger = logging.getLogger("touchline.common.vector_store")


class PineconeClient:
    """
    Namespaced query access to one Pinecone index.

    The SDK index handle is created lazily on first use so that a missing
    API key or package only surfaces as a failed query result.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        index_name: str = "touchline",
        index=None,
    ):
        """
        Initialize Pinecone client.

        Args:
            api_key: Pinecone API key
            index_name: Index to query
            index: Pre-built index handle (skips SDK construction)
        """
        self._api_key = api_key
        self._index_name = index_name
        self._index = index

    def _ensure_initialized(self) -> None:
        """Lazily initialize the index handle"""
        if self._index is not None:
            return

        if not self._api_key:
            raise RuntimeError("PINECONE_API_KEY is not set")

        try:
            from pinecone import Pinecone
        except ImportError as e:
            raise RuntimeError(f"pinecone package not installed: {e}")

        pc = Pinecone(api_key=self._api_key)
        self._index = pc.Index(self._index_name)
        logger.info("Connected to Pinecone index %s", self._index_name)

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def is_available(self) -> bool:
        """Check if client is available"""
        try:
            self._ensure_initialized()
            return True
        except Exception:
            return False

    def query(
        self,
        namespace: str,
        vector: List[float],
        top_k: int = 5,
        filter: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Run a nearest-neighbour query against one namespace.

        Args:
            namespace: Pinecone namespace to search
            vector: Query embedding vector
            top_k: Number of matches to return
            filter: Optional metadata filter in Pinecone operator syntax

        Returns:
            {"ok": True, "results": [{"id", "score", "metadata"}, ...]}
            or {"ok": False, "error": str}
        """
        try:
            self._ensure_initialized()

            kwargs = {
                "vector": vector,
                "top_k": top_k,
                "namespace": namespace,
                "include_metadata": True,
            }
            if filter:
                kwargs["filter"] = filter

            response = self._index.query(**kwargs)
            return {"ok": True, "results": self.parse_matches(response)}

        except Exception as e:
            logger.debug("Pinecone query failed (namespace=%s): %s", namespace, e)
            return {"ok": False, "error": str(e)}

    def parse_matches(self, response: Any) -> List[Dict[str, Any]]:
        """
        Convert an SDK query response into plain dicts.

        Handles both the SDK response object and its dict form.
        """
        if isinstance(response, dict):
            matches = response.get("matches") or []
        else:
            matches = getattr(response, "matches", None) or []

        parsed = []
        for match in matches:
            if isinstance(match, dict):
                match_id = match.get("id")
                score = match.get("score")
                metadata = match.get("metadata")
            else:
                match_id = getattr(match, "id", None)
                score = getattr(match, "score", None)
                metadata = getattr(match, "metadata", None)

            # Metadata occasionally arrives serialized
            if isinstance(metadata, str):
                try:
                    metadata = json.loads(metadata)
                except json.JSONDecodeError:
                    metadata = {"raw": metadata}

            parsed.append({
                "id": match_id,
                "score": score,
                "metadata": dict(metadata or {}),
            })

        return parsed
