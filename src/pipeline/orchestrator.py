"""Orchestrator: wires projection, fuzzy index, composer, distances and ranking.

Data flow:
  1. Projection builder → one flat text view per record
  2. Fuzzy index over the roster snapshot
  3. Query composer → filtered ids (groups ANDed, badges ORed)
  4. Geodistance service → distances from the reference location (optional)
  5. Ranking → ordered RankedProfessional rows
"""

import json
import logging

from src.core.config import Settings
from src.core.schemas import ProfessionalRecord, RankedProfessional, RankingMode, SearchGroup
from src.geo.service import GeodistanceService
from src.pipeline.codec import decode_career, encode_career
from src.pipeline.composer import evaluate, query_terms
from src.pipeline.matcher import FuzzyIndex
from src.pipeline.projection import build_projection
from src.pipeline.ranking import rank, relevance_score

logger = logging.getLogger(__name__)

__all__ = ["SearchEngine", "decode_career", "encode_career", "export_results_json"]


class SearchEngine:
    """Single entry point for ranked professional search.

    The geodistance service is optional: without it (or without a reference
    location) every distance is None and distance mode degrades to
    alphabetical order.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        geo_service: GeodistanceService | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._geo = geo_service

    def build_index(self, roster: list[ProfessionalRecord]) -> FuzzyIndex:
        """Index one roster snapshot."""
        projections = [build_projection(r) for r in roster]
        return FuzzyIndex(projections, self._settings.matcher)

    async def search(
        self,
        roster: list[ProfessionalRecord],
        query: list[SearchGroup],
        mode: RankingMode | str | None = None,
        reference_location: str | None = None,
    ) -> list[RankedProfessional]:
        """Filter the roster by the query and return it ranked by mode."""
        mode = RankingMode(mode) if mode is not None else self._settings.ranking.default_mode
        index = self.build_index(roster)
        by_id = {r.id: r for r in roster}

        kept_ids = evaluate(query, list(by_id), index)
        kept = [by_id[rid] for rid in kept_ids]
        logger.info("Query matched %d of %d professionals", len(kept), len(roster))

        distances = await self._distances(kept, reference_location)
        terms = query_terms(query)
        rows = [
            RankedProfessional(
                record=record,
                distance_km=distance,
                relevance=relevance_score(index, terms, record.id),
            )
            for record, distance in zip(kept, distances)
        ]

        ranked = rank(rows, mode)
        logger.info("Ranked %d professionals by %s", len(ranked), mode.value)
        return ranked

    async def _distances(
        self,
        records: list[ProfessionalRecord],
        reference_location: str | None,
    ) -> list[float | None]:
        if self._geo is None or not reference_location or not reference_location.strip():
            return [None] * len(records)
        logger.info("Calculating distances from '%s'", reference_location)
        return await self._geo.batch_distance(reference_location, [r.city for r in records])


def export_results_json(rows: list[RankedProfessional]) -> str:
    """Export ranked rows as a JSON string."""
    data = []
    for position, row in enumerate(rows, start=1):
        r = row.record
        data.append({
            "rank": position,
            "id": r.id,
            "full_name": r.full_name,
            "city": r.city,
            "available": r.available,
            "available_from": (
                r.effective_available_from.isoformat() if r.effective_available_from else None
            ),
            "skills": [s.to_legacy() for s in r.skills],
            "technologies": [t.to_legacy() for t in r.technologies],
            "languages": [lang.to_legacy() for lang in r.languages],
            "distance_km": row.distance_km,
            "relevance": row.relevance,
        })
    return json.dumps(data, indent=2)
