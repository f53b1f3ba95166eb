"""
Retriever - Football Question Routing

Decides, per message, which knowledge source(s) to query and assembles
the retrieved evidence into one context block for generation.

Key Components:
- EntityExtractor: Lexicon-based player/team/competition/minute hints
- KeywordIntentClassifier / LLMIntentClassifier: One intent per message
- VectorSearcher: Filtered semantic search over Pinecone namespaces
- WebSearcher: Live web search via Exa
- QueryRouter: Intent -> dispatch plan -> concurrent retrieval -> context

Pipeline:
1. Extract entities and classify intent
2. Look up the intent's dispatch plan
3. Run the plan's searches concurrently
4. Assemble tagged context sections
"""

from .context import assemble, format_result, with_retrieved_context
from .entities import EntityBag, EntityExtractor
from .factory import create_router
from .filters import build_filter
from .intent import (
    ClubIntent,
    KeywordIntentClassifier,
    LLMIntentClassifier,
    MatchIntent,
    is_current_info_query,
)
from .query_enhancer import enhance
from .results import RawResult, SearchOutcome
from .router import DISPATCH_PLANS, QueryRouter, RoutingResult
from .searcher import VectorSearcher
from .web_searcher import WebSearcher

__all__ = [
    "assemble",
    "format_result",
    "with_retrieved_context",
    "EntityBag",
    "EntityExtractor",
    "create_router",
    "build_filter",
    "ClubIntent",
    "KeywordIntentClassifier",
    "LLMIntentClassifier",
    "MatchIntent",
    "is_current_info_query",
    "enhance",
    "RawResult",
    "SearchOutcome",
    "DISPATCH_PLANS",
    "QueryRouter",
    "RoutingResult",
    "VectorSearcher",
    "WebSearcher",
]
