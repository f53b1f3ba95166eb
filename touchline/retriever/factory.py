"""
Router Factory

Builds a QueryRouter from configuration. Every client is constructed
once here and injected, so request handlers share one router.
"""

import logging
from typing import Optional

from ..common.config import TouchlineConfig, load_config
from ..common.embedding_service import EmbeddingService
from ..common.lexicon import load_lexicon
from ..common.llm_client import LLMClient
from ..common.vector_store import PineconeClient
from ..common.web_search import ExaClient
from .entities import EntityExtractor
from .intent import KeywordIntentClassifier, LLMIntentClassifier
from .router import QueryRouter
from .searcher import VectorSearcher
from .web_searcher import WebSearcher

logger = logging.getLogger("touchline.retriever.factory")


def create_classifier(config: TouchlineConfig, lexicon):
    """Build the configured intent classifier"""
    deployment = config.router.deployment

    if config.router.classifier == "llm":
        llm = LLMClient(
            provider=config.llm.provider,
            model=config.model_name,
            anthropic_api_key=config.llm.anthropic_api_key or None,
            openai_api_key=config.llm.openai_api_key or None,
            google_api_key=config.llm.google_api_key or None,
        )
        if not llm.is_available:
            # Still usable: every message degrades to generic
            logger.warning("LLM classifier configured but client unavailable")
        return LLMIntentClassifier(
            llm,
            deployment=deployment,
            temperature=config.llm.temperature,
            timeout=config.llm.timeout,
        )

    return KeywordIntentClassifier(lexicon, deployment=deployment)


def create_router(config: Optional[TouchlineConfig] = None) -> QueryRouter:
    """
    Build a router with real service clients.

    Args:
        config: Configuration (default: load_config())

    Returns:
        QueryRouter ready to serve requests
    """
    config = config or load_config()
    lexicon = load_lexicon(config.router.lexicon_path)

    embedding = EmbeddingService(
        api_key=config.embedding.openai_api_key or None,
        model=config.embedding.model,
        dimension=config.embedding.dimension,
    )
    vector_searcher = VectorSearcher(
        PineconeClient(
            api_key=config.pinecone.api_key or None,
            index_name=config.pinecone.index_name,
        ),
        embedding,
        default_top_k=config.pinecone.top_k,
    )
    web_searcher = WebSearcher(
        ExaClient(api_key=config.exa.api_key or None),
        num_results=config.exa.num_results,
        snippet_chars=config.exa.snippet_chars,
        content_chars=config.exa.content_chars,
    )

    router = QueryRouter(
        classifier=create_classifier(config, lexicon),
        extractor=EntityExtractor(lexicon),
        vector_searcher=vector_searcher,
        web_searcher=web_searcher,
        lexicon=lexicon,
        minute_window=config.router.minute_window,
    )
    logger.info(
        "Router ready: deployment=%s classifier=%s index=%s",
        config.router.deployment, config.router.classifier, config.pinecone.index_name,
    )
    return router
