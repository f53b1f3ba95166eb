"""
Query Router

Turns one message into a retrieval context:

1. Extract entities and classify intent (concurrently)
2. Look up the intent's dispatch plan
3. Run every plan step concurrently against the vector or web searcher
4. Assemble the non-empty result sets, in plan order

Dispatch plans are plain data (intent -> steps) so each intent's
behaviour can be read, tested and extended on its own. The router never
raises for a message: failures degrade to less (or no) context.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..common.lexicon import Lexicon
from .context import Section, assemble
from .entities import EntityBag, EntityExtractor
from .filters import (
    CLUB_FILTER_SCHEMA,
    DEFAULT_MINUTE_WINDOW,
    MATCH_FILTER_SCHEMA,
    NO_FILTER,
    build_filter,
)
from .intent import ClubIntent, MatchIntent, intent_set, is_current_info_query
from .query_enhancer import enhance
from .results import SearchOutcome

logger = logging.getLogger("touchline.retriever.router")

QueryBuilder = Callable[[str, EntityBag], str]

VECTOR = "vector"
WEB = "web"

# Vector store namespaces
MATCH_EVENTS = "match_events"
HISTORIC_KNOWLEDGE = "historic_knowledge"

WEB_RESULTS = "web_results"


def message_query(message: str, entities: EntityBag) -> str:
    return message


def fixture_query(message: str, entities: EntityBag) -> str:
    """'vs <opponent> <competition>', or the message when neither is known"""
    parts = []
    if entities.opponent:
        parts.append(f"vs {entities.opponent}")
    if entities.competition:
        parts.append(entities.competition)
    return " ".join(parts) or message


def fan_subject_query(message: str, entities: EntityBag) -> str:
    """The player or topic fans are talking about, else the message"""
    return entities.player or entities.topic or message


@dataclass(frozen=True)
class PlanStep:
    """One retrieval call within a dispatch plan"""
    source: str  # VECTOR or WEB
    tag: str  # Context section tag
    namespace: Optional[str] = None  # Vector namespace
    hint: Optional[str] = None  # Query enhancement hint
    query: QueryBuilder = message_query
    filter_schema: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchPlan:
    """Retrieval calls for an intent; an empty plan retrieves nothing"""
    steps: Tuple[PlanStep, ...] = ()


@dataclass(frozen=True)
class FallbackPlan:
    """Picks between two plans with a predicate over the message"""
    predicate: Callable[[str, Lexicon], bool]
    when_true: DispatchPlan
    when_false: DispatchPlan


Plan = Union[DispatchPlan, FallbackPlan]


MATCH_PLANS: Dict[Enum, Plan] = {
    MatchIntent.PERFORMANCE: DispatchPlan((
        PlanStep(VECTOR, MATCH_EVENTS, namespace=MATCH_EVENTS, filter_schema=MATCH_FILTER_SCHEMA),
    )),
    MatchIntent.HISTORY: DispatchPlan((
        PlanStep(VECTOR, HISTORIC_KNOWLEDGE, namespace=HISTORIC_KNOWLEDGE, filter_schema=MATCH_FILTER_SCHEMA),
    )),
    MatchIntent.TACTICS: DispatchPlan((
        PlanStep(VECTOR, HISTORIC_KNOWLEDGE, namespace=HISTORIC_KNOWLEDGE, filter_schema=MATCH_FILTER_SCHEMA),
        PlanStep(WEB, WEB_RESULTS, hint="tactics"),
    )),
    MatchIntent.FAN_CONVERSATION: DispatchPlan((
        PlanStep(WEB, WEB_RESULTS, hint="fan_conversation"),
    )),
    MatchIntent.GENERIC: DispatchPlan((
        PlanStep(VECTOR, MATCH_EVENTS, namespace=MATCH_EVENTS, filter_schema=NO_FILTER),
        PlanStep(VECTOR, HISTORIC_KNOWLEDGE, namespace=HISTORIC_KNOWLEDGE, filter_schema=NO_FILTER),
    )),
}

CLUB_LIVE_PLAN = DispatchPlan((
    PlanStep(WEB, WEB_RESULTS, hint="live", query=fixture_query),
))

CLUB_PLANS: Dict[Enum, Plan] = {
    ClubIntent.LIVE_MATCH: CLUB_LIVE_PLAN,
    ClubIntent.PREVIOUS_MATCH: DispatchPlan((
        PlanStep(WEB, WEB_RESULTS, hint="previous", query=fixture_query),
    )),
    ClubIntent.FAN_REACTION: DispatchPlan((
        PlanStep(WEB, WEB_RESULTS, hint="fan_conversation", query=fan_subject_query),
    )),
    ClubIntent.HISTORIC: DispatchPlan((
        PlanStep(VECTOR, HISTORIC_KNOWLEDGE, namespace=HISTORIC_KNOWLEDGE, filter_schema=CLUB_FILTER_SCHEMA),
    )),
    # General football concepts are answered from model knowledge
    ClubIntent.GENERAL: DispatchPlan(),
    ClubIntent.GENERIC: FallbackPlan(
        predicate=is_current_info_query,
        when_true=DispatchPlan((
            PlanStep(WEB, WEB_RESULTS, hint="live"),
        )),
        when_false=DispatchPlan((
            PlanStep(VECTOR, HISTORIC_KNOWLEDGE, namespace=HISTORIC_KNOWLEDGE, filter_schema=NO_FILTER),
        )),
    ),
}

DISPATCH_PLANS: Dict[str, Dict[Enum, Plan]] = {
    "match": MATCH_PLANS,
    "club": CLUB_PLANS,
}


@dataclass
class RoutingResult:
    """Everything the router decided for one message"""
    intent: Enum
    entities: EntityBag
    context: str = ""
    sections: List[Section] = field(default_factory=list)


class QueryRouter:
    """
    Routes messages to retrieval sources.

    Holds no per-request state, so one instance serves concurrent requests.
    All collaborators are injected.
    """

    def __init__(
        self,
        classifier,
        extractor: EntityExtractor,
        vector_searcher,
        web_searcher,
        lexicon: Lexicon,
        plans: Optional[Dict[Enum, Plan]] = None,
        minute_window: int = DEFAULT_MINUTE_WINDOW,
    ):
        """
        Initialize router.

        Args:
            classifier: KeywordIntentClassifier or LLMIntentClassifier
            extractor: Entity extractor
            vector_searcher: VectorSearcher
            web_searcher: WebSearcher
            lexicon: Keyword lists (for the live/current heuristic)
            plans: Intent -> plan table (default: the classifier's deployment table)
            minute_window: Minute tolerance for filters

        Raises:
            ValueError: if an intent of the deployment has no plan
        """
        self._classifier = classifier
        self._extractor = extractor
        self._vector = vector_searcher
        self._web = web_searcher
        self._lexicon = lexicon
        self._minute_window = minute_window
        self._intents = intent_set(classifier.deployment)
        self._plans = plans if plans is not None else DISPATCH_PLANS[classifier.deployment]

        missing = [i.value for i in self._intents if i not in self._plans]
        if missing:
            raise ValueError(f"No dispatch plan for intents: {', '.join(missing)}")

    def plan_for(self, intent: Enum, message: str) -> DispatchPlan:
        """Resolve the concrete plan for an intent"""
        plan = self._plans[intent]
        if isinstance(plan, FallbackPlan):
            return plan.when_true if plan.predicate(message, self._lexicon) else plan.when_false
        return plan

    async def route(self, message: str) -> str:
        """Return the retrieval context for a message (possibly empty)."""
        result = await self.retrieve(message)
        return result.context

    async def retrieve(self, message: str) -> RoutingResult:
        """
        Classify, dispatch and assemble for one message.

        Args:
            message: Raw user message

        Returns:
            RoutingResult; context is "" when nothing was retrieved
        """
        generic = self._intents.GENERIC

        if not message or not message.strip():
            return RoutingResult(intent=generic, entities=EntityBag())

        intent, entities = generic, EntityBag()
        try:
            intent, entities = await self._understand(message)
            plan = self.plan_for(intent, message)
            logger.info(
                "Routing intent=%s steps=%s entities=%s",
                intent.value,
                [s.tag for s in plan.steps],
                entities.to_dict(),
            )

            sections = await self._dispatch(plan, message, entities)
            return RoutingResult(
                intent=intent,
                entities=entities,
                context=assemble(sections),
                sections=sections,
            )
        except Exception as e:
            logger.error("Routing failed, continuing without retrieved context: %s", e, exc_info=True)
            return RoutingResult(intent=intent, entities=entities)

    async def _understand(self, message: str) -> Tuple[Enum, EntityBag]:
        """Extract entities and classify concurrently"""
        extracted, classification = await asyncio.gather(
            asyncio.to_thread(self._extractor.extract, message),
            asyncio.to_thread(self._classifier.parse, message),
        )
        # Lexicon matches take precedence over model-extracted entities
        return classification.intent, extracted.merge(classification.entities)

    async def _dispatch(
        self,
        plan: DispatchPlan,
        message: str,
        entities: EntityBag,
    ) -> List[Section]:
        """Run all steps concurrently; results keep plan order"""
        if not plan.steps:
            return []

        outcomes = await asyncio.gather(
            *(self._run_step(step, message, entities) for step in plan.steps),
            return_exceptions=True,
        )

        sections: List[Section] = []
        for step, outcome in zip(plan.steps, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                outcome = SearchOutcome.failure(f"{step.source}:{step.tag}", outcome)
            sections.append((step.tag, outcome.results_or_empty()))
        return sections

    async def _run_step(self, step: PlanStep, message: str, entities: EntityBag) -> SearchOutcome:
        query = step.query(message, entities)

        if step.source == VECTOR:
            query_filter = build_filter(entities, step.filter_schema, self._minute_window)
            return await self._vector.try_search(
                enhance(query, step.hint),
                step.namespace,
                filter=query_filter,
            )

        if step.source == WEB:
            return await self._web.try_search(query, step.hint)

        raise ValueError(f"Unknown retrieval source: {step.source!r}")


def result_counts(sections: Sequence[Section]) -> Dict[str, int]:
    """Per-tag result counts, for logging and CLI output"""
    counts: Dict[str, int] = {}
    for tag, results in sections:
        counts[tag] = counts.get(tag, 0) + len(results)
    return counts
