"""Fuzzy matcher over search projections.

Score range: 0.0 (exact) to 1.0 (no match). Per field, the distance is
1 - rapidfuzz similarity / 100, stretched by max_weight / field_weight so
lighter fields need closer matches. A record's score for a term is its best
field score; it is accepted when that score is at or below the threshold.
"""

import logging
from collections.abc import Callable

from rapidfuzz import fuzz, utils

from src.core.config import MatcherConfig
from src.core.schemas import MatchResult
from src.pipeline.projection import PROJECTION_FIELDS, Projection

logger = logging.getLogger(__name__)

NO_MATCH_SCORE = 1.0


class FuzzyIndex:
    """Searchable index over one roster snapshot.

    Build a new index whenever the roster changes. Scores are memoized per
    normalized term, so repeated lookups are stable and cheap.
    """

    def __init__(self, projections: list[Projection], config: MatcherConfig | None = None) -> None:
        self._config = config or MatcherConfig()
        weights = self._config.weights.model_dump()
        max_weight = max(weights[f] for f in PROJECTION_FIELDS)
        self._stretch = {f: max_weight / weights[f] for f in PROJECTION_FIELDS}
        self._ids = [p.id for p in projections]
        self._fields = {p.id: _processed_fields(p, utils.default_process) for p in projections}
        self._symbol_fields = {p.id: _processed_fields(p, _keep_symbols) for p in projections}
        self._scores: dict[str, dict[str, float]] = {}
        logger.debug("FuzzyIndex built over %d projections", len(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def threshold(self) -> float:
        return self._config.threshold

    def search(self, term: str) -> list[MatchResult]:
        """Return accepted matches for a term, best first (ties broken by record id)."""
        scores = self._term_scores(term)
        results = [
            MatchResult(record_id=rid, term=term, score=score, accepted=True)
            for rid, score in scores.items()
            if score <= self._config.threshold
        ]
        results.sort(key=lambda r: (r.score, r.record_id))
        return results

    def accepted_ids(self, term: str) -> set[str]:
        """The accepted set of a term: ids scoring at or below the threshold."""
        return {rid for rid, s in self._term_scores(term).items() if s <= self._config.threshold}

    def score(self, term: str, record_id: str) -> float:
        """Score of one record for a term; NO_MATCH_SCORE for unknown ids or invalid terms."""
        return self._term_scores(term).get(record_id, NO_MATCH_SCORE)

    def match(self, term: str, record_id: str) -> MatchResult:
        score = self.score(term, record_id)
        return MatchResult(
            record_id=record_id,
            term=term,
            score=score,
            accepted=score <= self._config.threshold and self._is_valid(term),
        )

    def _is_valid(self, term: str) -> bool:
        return len(term.strip()) >= self._config.min_match_length

    def _normalize(self, term: str) -> tuple[str, dict[str, list[tuple[str, str]]]]:
        """Processed term and the field texts to score it against.

        Terms that are mostly symbols (C#, C++) would shrink below the minimum
        length under default_process, so they are compared with symbols kept.
        """
        processed = utils.default_process(term)
        if len(processed) >= self._config.min_match_length:
            return processed, self._fields
        return _keep_symbols(term), self._symbol_fields

    def _term_scores(self, term: str) -> dict[str, float]:
        if not self._is_valid(term):
            logger.debug("Term %r is shorter than %d characters - accepts nothing",
                         term, self._config.min_match_length)
            return {}
        key, fields = self._normalize(term)
        cached = self._scores.get(key)
        if cached is None:
            cached = {rid: self._score_record(key, fields[rid]) for rid in self._ids}
            self._scores[key] = cached
        return cached

    def _score_record(self, term: str, fields: list[tuple[str, str]]) -> float:
        best = NO_MATCH_SCORE
        for field, text in fields:
            distance = 1.0 - _similarity(term, text) / 100.0
            best = min(best, min(NO_MATCH_SCORE, distance * self._stretch[field]))
            if best == 0.0:
                break
        return best


def _keep_symbols(text: str) -> str:
    return " ".join(text.lower().split())


def _processed_fields(
    projection: Projection, processor: Callable[[str], str],
) -> list[tuple[str, str]]:
    processed = [(f, processor(getattr(projection, f))) for f in PROJECTION_FIELDS]
    return [(f, text) for f, text in processed if text]


def _similarity(term: str, text: str) -> float:
    # partial_ratio aligns the shorter string inside the longer one, so a
    # field shorter than the term must be compared whole.
    if len(term) <= len(text):
        return fuzz.partial_ratio(term, text)
    return fuzz.ratio(term, text)
