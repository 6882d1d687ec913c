"""Similarity search over a manual pack, with a keyword fallback."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from manualpack.protocols import EmbeddingProvider
from manualpack.storage import ManualStore

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = (0.8, 0.75, 0.7, 0.65, 0.6)

# Arcade terminology: trigger phrase -> terms appended to the query
SYNONYMS = {
    "not working": "broken, fails, error, malfunction, issue",
    "stuck": "jammed, frozen, stuck, blocked, immobile",
    "coin": "credit, token, quarter, payment, money",
    "joystick": "controller, stick, control, directional",
    "button": "switch, control, input, press",
    "screen": "monitor, display, CRT, video",
    "sound": "audio, speaker, noise, volume",
    "power": "electrical, voltage, supply, AC/DC",
    "cabinet": "arcade, machine, unit, housing",
}

_TERM_RE = re.compile(r"[a-z0-9/]+")

STOPWORDS = frozenset(
    "a an and are at be does for how i in is it my of on or the to what when why with".split()
)


def expand_query(query: str) -> str:
    """Lower-case the query and append synonyms for known arcade terms."""
    expanded = query.lower()
    for term, expansion in SYNONYMS.items():
        if term in expanded:
            expanded += f" {expansion}"
    return expanded


def query_terms(text: str) -> list[str]:
    """Split text into de-duplicated keyword terms, dropping stopwords."""
    terms = []
    for term in _TERM_RE.findall(text.lower()):
        if term not in STOPWORDS and term not in terms:
            terms.append(term)
    return terms


@dataclass
class SearchResult:
    """One retrieved chunk."""

    manual_id: str
    manual_title: str
    page_start: int
    page_end: int
    content: str
    score: float
    section_heading: Optional[str] = None


@dataclass
class SearchResponse:
    """Results plus the expanded query and the strategy that produced them."""

    query: str
    strategy: str
    results: list[SearchResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)


def _to_result(row: dict, score_key: str) -> SearchResult:
    return SearchResult(
        manual_id=row["manual_id"],
        manual_title=row["manual_title"] or row["manual_id"],
        page_start=row["page_start"],
        page_end=row["page_end"],
        content=row["content"],
        score=row[score_key],
        section_heading=row["section_heading"],
    )


class ManualSearcher:
    """Vector search with progressively relaxed thresholds.

    Each threshold is tried in turn; the first that yields at least
    ``min_results`` chunks wins. When none does, keyword search over the
    expanded query is used instead.
    """

    def __init__(
        self,
        store: ManualStore,
        embedder: EmbeddingProvider,
        thresholds: Sequence[float] = DEFAULT_THRESHOLDS,
        min_results: int = 3,
    ):
        self.store = store
        self.embedder = embedder
        self.thresholds = tuple(sorted(thresholds, reverse=True))
        self.min_results = min_results

    def search(
        self,
        query: str,
        manual_id: Optional[str] = None,
        max_results: int = 6,
    ) -> SearchResponse:
        """Search the pack for chunks relevant to a question.

        Args:
            query: Natural language question
            manual_id: Restrict results to one manual
            max_results: Maximum number of results to return

        Returns:
            SearchResponse whose strategy is "vector", "text" or "none"
        """
        expanded = expand_query(query)
        logger.debug(f"Expanded query: {expanded}")

        query_embedding = self.embedder.embed([query])[0]
        for threshold in self.thresholds:
            rows = self.store.recall(
                query_embedding,
                limit=max_results * 2,
                manual_id=manual_id,
                min_score=threshold,
            )
            if len(rows) >= self.min_results:
                logger.debug(f"Vector search found {len(rows)} results at threshold {threshold}")
                return SearchResponse(
                    query=expanded,
                    strategy="vector",
                    results=[_to_result(r, "similarity") for r in rows[:max_results]],
                )

        rows = self.store.keyword_search(
            query_terms(expanded), limit=max_results, manual_id=manual_id
        )
        if rows:
            logger.debug(f"Falling back to text search: {len(rows)} results")
            return SearchResponse(
                query=expanded,
                strategy="text",
                results=[_to_result(r, "score") for r in rows],
            )

        logger.debug("No results found")
        return SearchResponse(query=expanded, strategy="none")
