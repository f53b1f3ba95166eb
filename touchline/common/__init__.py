"""
Touchline Common Module

Shared infrastructure for the retriever pipeline: configuration,
service clients and keyword lists.
"""

from .config import TouchlineConfig, load_config
from .embedding_service import EmbeddingService
from .lexicon import Lexicon, load_lexicon
from .llm_client import LLMClient
from .vector_store import PineconeClient
from .web_search import ExaClient

__all__ = [
    "TouchlineConfig",
    "load_config",
    "EmbeddingService",
    "Lexicon",
    "load_lexicon",
    "LLMClient",
    "PineconeClient",
    "ExaClient",
]
