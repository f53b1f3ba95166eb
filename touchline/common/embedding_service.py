"""
Embedding Service

Generates query embeddings with the OpenAI embeddings API.
Vectors must match the dimension the Pinecone index was built with.
"""

import logging
from typing import List, Optional

import numpy as np

logger = logging.getLogger("touchline.common.embedding_service")


class EmbeddingService:
    """
    Query embedding service.

    One instance is created at startup and injected into the vector
    searcher; tests substitute a Mock with the same embed_single() method.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        dimension: int = 1024,
        client=None,
    ):
        """
        Initialize embedding service.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            dimension: Expected vector length
            client: Pre-built OpenAI client (skips construction)
        """
        self._model = model
        self._dimension = dimension
        self._client = client

        if self._client is None and api_key:
            try:
                from openai import OpenAI
                self._client = OpenAI(api_key=api_key)
                logger.info("EmbeddingService initialized: model=%s, dim=%d", model, dimension)
            except ImportError:
                logger.warning("openai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize OpenAI client: %s", e)
        elif self._client is None:
            logger.info("OpenAI API key not provided, embedding service unavailable")

    @property
    def is_available(self) -> bool:
        """Check if embedding service is available"""
        return self._client is not None

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for a list of texts.

        Args:
            texts: List of non-empty strings to embed

        Returns:
            List of embedding vectors

        Raises:
            RuntimeError: if the service is unavailable
            ValueError: on empty input text or a dimension mismatch
        """
        if not self._client:
            raise RuntimeError("Embedding service not available - check OPENAI_API_KEY")

        if not texts:
            return []

        cleaned = [t.replace("\n", " ").strip() for t in texts]
        if any(not t for t in cleaned):
            raise ValueError("Cannot embed empty text")

        response = self._client.embeddings.create(
            model=self._model,
            input=cleaned,
            dimensions=self._dimension,
        )

        matrix = np.asarray([d.embedding for d in response.data], dtype=np.float32)
        if matrix.ndim != 2 or matrix.shape != (len(cleaned), self._dimension):
            raise ValueError(
                f"Invalid embedding shape: expected ({len(cleaned)}, {self._dimension}), "
                f"got {matrix.shape}"
            )

        return matrix.tolist()

    def embed_single(self, text: str) -> List[float]:
        """
        Generate embedding for a single text.

        Args:
            text: String to embed

        Returns:
            Embedding vector of length `dimension`
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        embeddings = self.embed([text])
        return embeddings[0]
