"""
Retrieval Results

Source-agnostic result records and the per-call outcome type that carries
either a result list or a failure.
"""

import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

logger = logging.getLogger("touchline.retriever.results")


@dataclass(frozen=True)
class RawResult:
    """A single normalized retrieval hit"""
    text: str
    source: str  # "vector" or "web"
    score: Optional[float] = None  # None for unscored web hits
    id: Optional[str] = None
    title: str = ""
    url: str = ""
    content: str = ""
    published_date: Optional[str] = None
    media_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_scored(self) -> bool:
        return self.score is not None


@dataclass
class SearchOutcome:
    """Outcome of one adapter call: a result list, or the error that prevented it"""
    ok: bool
    source: str
    results: List[RawResult] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def success(cls, source: str, results: List[RawResult]) -> "SearchOutcome":
        return cls(ok=True, source=source, results=list(results))

    @classmethod
    def failure(cls, source: str, error: Any) -> "SearchOutcome":
        return cls(ok=False, source=source, error=str(error) or type(error).__name__)

    def results_or_empty(self) -> List[RawResult]:
        """Collapse a failed outcome to an empty list.

        This is the only place where a retrieval failure turns into
        "no evidence"; the failure is logged here.
        """
        if self.ok:
            return self.results
        logger.warning("%s retrieval failed, continuing without it: %s", self.source, self.error)
        return []
