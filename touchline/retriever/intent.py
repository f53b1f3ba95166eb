"""
Intent Classifier

Maps a raw message to exactly one intent from the deployment's closed set.
Two strategies:
- KeywordIntentClassifier: ordered keyword rules from the lexicon
- LLMIntentClassifier: one structured-output LLM call, also extracting entities

Neither strategy raises: anything unexpected degrades to GENERIC.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Type

from ..common.lexicon import Lexicon
from ..common.llm_utils import parse_llm_json
from .entities import EntityBag

logger = logging.getLogger("touchline.retriever.intent")


class MatchIntent(str, Enum):
    """Intents for the match companion deployment"""
    PERFORMANCE = "performance"  # "How did Rao play between 25-30?"
    HISTORY = "history"  # "Has Mendes been consistent this season?"
    TACTICS = "tactics"  # "Why is Blueport pressing higher?"
    FAN_CONVERSATION = "fan_conversation"  # "What do fans think of the ref?"
    GENERIC = "generic"  # Catch-all


class ClubIntent(str, Enum):
    """Intents for the club companion deployment"""
    LIVE_MATCH = "live_match"  # "What's the score?"
    PREVIOUS_MATCH = "previous_match"  # "How did the last game go?"
    FAN_REACTION = "fan_reaction"  # "What are fans saying?"
    HISTORIC = "historic"  # "How does the club defend?"
    GENERAL = "general"  # "What is a low block?"
    GENERIC = "generic"  # Catch-all


INTENT_SETS: Dict[str, Type[Enum]] = {
    "match": MatchIntent,
    "club": ClubIntent,
}


def intent_set(deployment: str) -> Type[Enum]:
    try:
        return INTENT_SETS[deployment]
    except KeyError:
        raise ValueError(f"Unknown deployment: {deployment!r}")


@dataclass(frozen=True)
class Classification:
    """Intent plus any entities the classifier extracted on the way"""
    intent: Enum
    entities: EntityBag = field(default_factory=EntityBag)


class KeywordIntentClassifier:
    """
    Deterministic keyword classifier.

    Rules are tried in lexicon order and the first intent with a keyword
    contained in the lowercased message wins, so the rule order is the
    tie-break policy:
    - match: fan_conversation, tactics, performance, history
    - club: fan_reaction, live_match, previous_match, general, historic
    """

    def __init__(self, lexicon: Lexicon, deployment: str = "match"):
        self._intents = intent_set(deployment)
        self._deployment = deployment
        self._rules = []
        for name, keywords in lexicon.rules_for(deployment):
            try:
                intent = self._intents(name)
            except ValueError:
                raise ValueError(f"Lexicon rule for unknown {deployment} intent: {name!r}")
            self._rules.append((intent, keywords))

    @property
    def deployment(self) -> str:
        return self._deployment

    def parse(self, text: str) -> Classification:
        return Classification(intent=self.classify(text))

    def classify(self, text: str) -> Enum:
        if not text or not text.strip():
            return self._intents.GENERIC

        text_lower = text.lower()
        for intent, keywords in self._rules:
            if any(k in text_lower for k in keywords):
                return intent

        return self._intents.GENERIC


# Structured-output instructions, one per deployment
MATCH_CLASSIFY_PROMPT = """You are an intent classifier for a football match companion assistant.
Classify the user's message into exactly one intent:

- "performance": the current match, live events, specific minute windows, shots, "this half", "right now", current player performance
- "history": seasons, previous matches, career stats, past years, historical data
- "tactics": formations, pressing, low block, high press, tactical strategies, team shape, transitions
- "fan_conversation": fans, reactions, Twitter, Reddit, social media sentiment, "what people are saying"
- "generic": anything else

Also extract, when mentioned:
- "player": player name
- "team": team name
- "opponent": opposing team name
- "competition": competition name
- "minute": minute number as an integer
- "topic": short subject of the question (e.g. "referee")

Respond with ONLY a JSON object, using null for anything not mentioned:
{"intent": "...", "player": null, "team": null, "opponent": null, "competition": null, "minute": null, "topic": null}

Examples:
- "How did Arjun Rao perform between minute 25-30?" -> {"intent": "performance", "player": "Arjun Rao", "minute": 25}
- "What do fans think about the referee?" -> {"intent": "fan_conversation", "topic": "referee"}
- "Why is Blueport pressing higher?" -> {"intent": "tactics", "team": "Blueport"}
- "Has Leo Mendes been consistent this season?" -> {"intent": "history", "player": "Leo Mendes"}
- "What formation are Redchester using?" -> {"intent": "tactics", "team": "Redchester"}"""

CLUB_CLASSIFY_PROMPT = """You are an intent classifier for a football club companion assistant.
Classify the user's message into exactly one intent:

- "live_match": the match in progress: score, lineup, what just happened
- "previous_match": recent completed matches, match reports, results
- "fan_reaction": what fans are saying, social media, Reddit, Twitter
- "historic": club tactics, player roles and profiles, club philosophy, history and identity
- "general": general football concepts that need no club data (e.g. "What is a low block?")
- "generic": anything else

Also extract, when mentioned:
- "player": player name
- "team": team name
- "opponent": opposing team name
- "competition": competition name
- "minute": minute number as an integer
- "topic": short subject of the question (e.g. "referee", "injury")

Respond with ONLY a JSON object, using null for anything not mentioned:
{"intent": "...", "player": null, "team": null, "opponent": null, "competition": null, "minute": null, "topic": null}

Examples:
- "What's the score against Barcelona?" -> {"intent": "live_match", "opponent": "Barcelona"}
- "Match report from the Copa del Rey game?" -> {"intent": "previous_match", "competition": "Copa del Rey"}
- "What are fans saying about Bellingham?" -> {"intent": "fan_reaction", "player": "Bellingham"}
- "What formation are Redchester using?" -> {"intent": "historic", "team": "Redchester"}
- "Explain gegenpressing" -> {"intent": "general"}"""

CLASSIFY_PROMPTS = {
    "match": MATCH_CLASSIFY_PROMPT,
    "club": CLUB_CLASSIFY_PROMPT,
}


class LLMIntentClassifier:
    """
    Model-assisted classifier.

    Makes a single JSON-output call per message. The reply must parse as a
    JSON object; an intent outside the deployment's set is coerced to
    GENERIC, and any failure (unavailable client, network, timeout,
    malformed reply) degrades to GENERIC with no entities.
    """

    def __init__(
        self,
        llm_client,
        deployment: str = "match",
        temperature: float = 0.1,
        timeout: float = 15.0,
    ):
        self._llm = llm_client
        self._intents = intent_set(deployment)
        self._deployment = deployment
        self._prompt = CLASSIFY_PROMPTS[deployment]
        self._temperature = temperature
        self._timeout = timeout

    @property
    def deployment(self) -> str:
        return self._deployment

    def classify(self, text: str) -> Enum:
        return self.parse(text).intent

    def parse(self, text: str) -> Classification:
        generic = Classification(intent=self._intents.GENERIC)

        if not text or not text.strip():
            return generic

        try:
            raw = self._llm.generate(
                text,
                system=self._prompt,
                max_tokens=200,
                temperature=self._temperature,
                json_output=True,
                timeout=self._timeout,
            )
            data = parse_llm_json(raw)
            intent = self._coerce_intent(data.get("intent"))
            entities = EntityBag.from_dict(data)
        except Exception as e:
            logger.warning("LLM intent classification failed, using generic: %s", e)
            return generic

        logger.debug("LLM classified %r as %s (%s)", text[:80], intent.value, entities.to_dict())
        return Classification(intent=intent, entities=entities)

    def _coerce_intent(self, value) -> Enum:
        valid = {i.value: i for i in self._intents}
        intent = valid.get(str(value).strip().lower()) if value is not None else None
        if intent is None:
            logger.info("LLM returned unknown intent %r, using generic", value)
            return self._intents.GENERIC
        return intent


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)


def is_current_info_query(text: str, lexicon: Lexicon) -> bool:
    """
    Decide whether an otherwise-unclassified message asks for current/live information.

    True when ANY of these holds:
    1. a temporal keyword is present ("today", "latest", "news", ...)
    2. a subject-context keyword is present ("injury", "transfer", "lineup", ...)
    3. the message matches one of the info-seeking question patterns
    """
    if not text or not text.strip():
        return False

    has_temporal = any(_keyword_pattern(k).search(text) for k in lexicon.temporal_keywords)
    has_subject = any(_keyword_pattern(k).search(text) for k in lexicon.subject_keywords)
    text_lower = text.lower().strip()
    asks_for_info = any(p.search(text_lower) for p in lexicon.compiled_question_patterns())

    return has_temporal or has_subject or asks_for_info
