"""Multi-mode ranking of a filtered result set.

Every mode is a total order ending in the name key, so equal primary keys
always fall back to alphabetical order. Missing values (no distance, no
relevance, no availability date) sort as +infinity.
"""

import logging
import math
import unicodedata
from collections.abc import Callable
from typing import Any

from src.core.schemas import RankedProfessional, RankingMode
from src.pipeline.matcher import FuzzyIndex

logger = logging.getLogger(__name__)

_INF = math.inf


def name_key(row: RankedProfessional) -> tuple[str, str, str]:
    """Case- and accent-insensitive name ordering, then raw name, then id."""
    name = row.record.full_name
    folded = unicodedata.normalize("NFKD", name).casefold()
    return (folded, name, row.record.id)


def relevance_score(index: FuzzyIndex, terms: list[str], record_id: str) -> float | None:
    """Mean matcher score of a record over all query terms, None without terms."""
    if not terms:
        return None
    return sum(index.score(t, record_id) for t in terms) / len(terms)


def _alphabetical(row: RankedProfessional) -> tuple[Any, ...]:
    return name_key(row)


def _relevance(row: RankedProfessional) -> tuple[Any, ...]:
    relevance = _INF if row.relevance is None else row.relevance
    return (relevance, *name_key(row))


def _distance(row: RankedProfessional) -> tuple[Any, ...]:
    distance = _INF if row.distance_km is None else row.distance_km
    return (distance, *name_key(row))


def _availability(row: RankedProfessional) -> tuple[Any, ...]:
    record = row.record
    if record.available:
        return (0, 0.0, *name_key(row))
    available_from = record.effective_available_from
    if available_from is None:
        return (2, _INF, *name_key(row))
    return (1, available_from.timestamp(), *name_key(row))


_SORT_KEYS: dict[RankingMode, Callable[[RankedProfessional], tuple[Any, ...]]] = {
    RankingMode.ALPHABETICAL: _alphabetical,
    RankingMode.RELEVANCE: _relevance,
    RankingMode.DISTANCE: _distance,
    RankingMode.AVAILABILITY: _availability,
}


def rank(rows: list[RankedProfessional], mode: RankingMode | str = RankingMode.ALPHABETICAL) -> list[RankedProfessional]:
    """Return the rows ordered by the given mode. The input list is not modified.

    Raises:
        ValueError: If mode is not a known ranking mode.
    """
    mode = RankingMode(mode)
    if mode is RankingMode.RELEVANCE and all(r.relevance is None for r in rows):
        logger.debug("No relevance scores - falling back to alphabetical")
        mode = RankingMode.ALPHABETICAL
    return sorted(rows, key=_SORT_KEYS[mode])
