"""
Touchline

Question routing and retrieval for football companion chat.

Philosophy:
- One intent per message, decided before any retrieval happens
- Retrieval is best-effort: a failing source contributes nothing, never an error
- Routing is data: every intent maps to an explicit dispatch plan
- Keyword lists are configuration, not code

Usage:
    from touchline.common import load_config
    from touchline.retriever import create_router

    router = create_router(load_config())
    context = await router.route("What formation are Redchester using?")
"""

__version__ = "0.1.0"
