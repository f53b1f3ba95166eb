"""
Lexicon Loader

Loads the hand-curated keyword lists (players, teams, intent rules, ...)
from a JSON file. The bundled file lives in lexicons/football.json; a
deployment can point router.lexicon_path at its own copy.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from .config import DEFAULT_LEXICON_PATH

logger = logging.getLogger("touchline.common.lexicon")

IntentRules = Tuple[Tuple[str, Tuple[str, ...]], ...]


@dataclass(frozen=True)
class Lexicon:
    """Keyword lists used by extraction, classification and the live heuristic"""
    players: Tuple[str, ...] = ()
    teams: Tuple[str, ...] = ()
    competitions: Tuple[str, ...] = ()
    time_phrases: Tuple[str, ...] = ()
    topics: Tuple[str, ...] = ()
    intent_rules: Tuple[Tuple[str, IntentRules], ...] = ()
    temporal_keywords: Tuple[str, ...] = ()
    subject_keywords: Tuple[str, ...] = ()
    question_patterns: Tuple[str, ...] = ()

    def rules_for(self, deployment: str) -> IntentRules:
        """Ordered (intent, keywords) rules for a deployment"""
        for name, rules in self.intent_rules:
            if name == deployment:
                return rules
        return ()

    def compiled_question_patterns(self) -> Tuple[re.Pattern, ...]:
        return tuple(re.compile(p, re.IGNORECASE) for p in self.question_patterns)


def _strings(data: dict, key: str) -> Tuple[str, ...]:
    values = data.get(key, [])
    if not isinstance(values, list):
        raise ValueError(f"Lexicon field '{key}' must be a list")
    return tuple(str(v) for v in values if str(v).strip())


def _parse_intent_rules(data: dict) -> Tuple[Tuple[str, IntentRules], ...]:
    raw_rules: Dict[str, list] = data.get("intent_rules", {})
    if not isinstance(raw_rules, dict):
        raise ValueError("Lexicon field 'intent_rules' must be an object")

    parsed = []
    for deployment, rules in raw_rules.items():
        ordered = []
        for entry in rules:
            intent, keywords = entry
            ordered.append((str(intent), tuple(str(k).lower() for k in keywords)))
        parsed.append((str(deployment), tuple(ordered)))
    return tuple(parsed)


def parse_lexicon(data: dict) -> Lexicon:
    """Build a Lexicon from its JSON dict form"""
    lexicon = Lexicon(
        players=_strings(data, "players"),
        teams=_strings(data, "teams"),
        competitions=_strings(data, "competitions"),
        time_phrases=_strings(data, "time_phrases"),
        topics=_strings(data, "topics"),
        intent_rules=_parse_intent_rules(data),
        temporal_keywords=_strings(data, "temporal_keywords"),
        subject_keywords=_strings(data, "subject_keywords"),
        question_patterns=_strings(data, "question_patterns"),
    )
    # Fail at load time rather than on the first message
    lexicon.compiled_question_patterns()
    return lexicon


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    """
    Load a lexicon file.

    Args:
        path: JSON file path (defaults to the bundled football lexicon)

    Raises:
        OSError, ValueError: if the file is missing or malformed
    """
    lexicon_path = Path(path) if path else DEFAULT_LEXICON_PATH
    with open(lexicon_path, encoding="utf-8") as f:
        data = json.load(f)

    lexicon = parse_lexicon(data)
    logger.debug(
        "Loaded lexicon %s: %d players, %d teams, %d competitions",
        lexicon_path, len(lexicon.players), len(lexicon.teams), len(lexicon.competitions),
    )
    return lexicon
