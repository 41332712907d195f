"""Boolean query composer: groups are ANDed, badges within a group are ORed.

An empty group is vacuously satisfied; a query without any badge keeps the
whole roster.
"""

import logging

from src.core.schemas import SearchGroup
from src.pipeline.matcher import FuzzyIndex

logger = logging.getLogger(__name__)


def query_terms(query: list[SearchGroup]) -> list[str]:
    """Distinct badges of a query in first-seen order."""
    seen: dict[str, None] = {}
    for group in query:
        for badge in group.badges:
            seen.setdefault(badge, None)
    return list(seen)


def evaluate(query: list[SearchGroup], roster_ids: list[str], index: FuzzyIndex) -> list[str]:
    """Return the roster ids matching every group of the query, in roster order."""
    groups = [g for g in query if g.badges]
    if not groups:
        return list(roster_ids)

    accepted: dict[str, set[str]] = {}

    def group_matches(group: SearchGroup, record_id: str) -> bool:
        for badge in group.badges:
            if badge not in accepted:
                accepted[badge] = index.accepted_ids(badge)
            if record_id in accepted[badge]:
                return True
        return False

    result = [rid for rid in roster_ids if all(group_matches(g, rid) for g in groups)]
    logger.debug(
        "Query with %d groups kept %d of %d records", len(groups), len(result), len(roster_ids),
    )
    return result
