"""
Entity Extractor

Pulls structured hints (player, team, opponent, competition, minute,
timeframe, topic) out of a message by matching it against the lexicon.
Pure and deterministic: the same text always yields the same EntityBag.
"""

import re
from dataclasses import dataclass, fields, replace
from typing import Dict, Any, Iterable, Optional, Tuple

from ..common.lexicon import Lexicon

# Minute references, tried in order
MINUTE_PATTERNS = [
    re.compile(r"\bminutes?\s+(\d{1,3})\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,3})(?:st|nd|rd|th)?[\s-]*(?:minute|min)s?\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,3})'"),
]
MAX_MINUTE = 130

OPPONENT_PREFIX = r"(?:vs\.?|versus|against)\s+"


@dataclass(frozen=True)
class EntityBag:
    """Optional structured hints extracted from one message"""
    player: Optional[str] = None
    team: Optional[str] = None
    opponent: Optional[str] = None
    competition: Optional[str] = None
    minute: Optional[int] = None
    timeframe: Optional[str] = None
    topic: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merge(self, other: "EntityBag") -> "EntityBag":
        """Fill fields missing here from another bag (this bag wins)"""
        updates = {
            f.name: getattr(other, f.name)
            for f in fields(self)
            if getattr(self, f.name) is None and getattr(other, f.name) is not None
        }
        return replace(self, **updates) if updates else self

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityBag":
        """Build from loosely-typed data (e.g. model output), dropping junk values"""
        values = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if raw is None:
                continue
            if f.name == "minute":
                try:
                    minute = int(raw)
                except (TypeError, ValueError, OverflowError):
                    continue
                if 0 <= minute <= MAX_MINUTE:
                    values["minute"] = minute
                continue
            text = str(raw).strip()
            if text and text.lower() not in ("null", "none", "undefined", "n/a"):
                values[f.name] = text
        return cls(**values)


def _name_pattern(name: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(name) + r"\b", re.IGNORECASE)


class EntityExtractor:
    """
    Lexicon-driven entity extraction.

    For each category the candidate occurring earliest in the text wins;
    equal positions are broken by lexicon order. No scoring.
    """

    def __init__(self, lexicon: Lexicon):
        self._lexicon = lexicon
        self._players = [(n, _name_pattern(n)) for n in lexicon.players]
        self._teams = [(n, _name_pattern(n)) for n in lexicon.teams]
        self._competitions = [(n, _name_pattern(n)) for n in lexicon.competitions]
        self._time_phrases = [(n, _name_pattern(n)) for n in lexicon.time_phrases]
        self._topics = [(n, _name_pattern(n)) for n in lexicon.topics]
        self._opponents = [
            (n, re.compile(r"\b" + OPPONENT_PREFIX + re.escape(n) + r"\b", re.IGNORECASE))
            for n in lexicon.teams
        ]

    def extract(self, text: str) -> EntityBag:
        """
        Extract entities from a message.

        Args:
            text: Raw user message

        Returns:
            EntityBag with every category that matched
        """
        if not text or not text.strip():
            return EntityBag()

        opponent = self._first_match(text, self._opponents)
        team = self._first_match(
            text,
            [(n, p) for n, p in self._teams if n != opponent],
        )

        return EntityBag(
            player=self._first_match(text, self._players),
            team=team,
            opponent=opponent,
            competition=self._first_match(text, self._competitions),
            minute=self._extract_minute(text),
            timeframe=self._first_match(text, self._time_phrases),
            topic=self._first_match(text, self._topics),
        )

    def _first_match(
        self,
        text: str,
        candidates: Iterable[Tuple[str, re.Pattern]],
    ) -> Optional[str]:
        """Return the canonical name of the earliest-matching candidate"""
        best = None
        best_pos = None
        for name, pattern in candidates:
            m = pattern.search(text)
            if m and (best_pos is None or m.start() < best_pos):
                best, best_pos = name, m.start()
        return best

    def _extract_minute(self, text: str) -> Optional[int]:
        for pattern in MINUTE_PATTERNS:
            m = pattern.search(text)
            if m:
                minute = int(m.group(1))
                if 0 <= minute <= MAX_MINUTE:
                    return minute
        return None
