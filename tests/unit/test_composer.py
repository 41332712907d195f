"""Tests for the boolean query composer (groups ANDed, badges ORed)."""

from src.core.schemas import ProfessionalRecord, SearchGroup
from src.pipeline.composer import evaluate, query_terms
from src.pipeline.matcher import FuzzyIndex
from src.pipeline.projection import build_projection


def _record(rid: str, name: str, skill: str, summary: str) -> ProfessionalRecord:
    return ProfessionalRecord(id=rid, full_name=name, skills=[skill], work_experience=summary)


_ROSTER = [
    _record("a", "Alice Able", "Rust (expert)", "Based in Budapest"),
    _record("b", "Bob Brown", "Rust (senior)", "Based in Berlin"),
    _record("c", "Carol Clark", "Rust (junior)", "Based in Vienna"),
    _record("d", "Dave Dunn", "Go (senior)", "Based in Budapest"),
]
_IDS = [r.id for r in _ROSTER]


def _index() -> FuzzyIndex:
    return FuzzyIndex([build_projection(r) for r in _ROSTER])


class TestEmptyQuery:
    def test_no_groups_returns_roster(self) -> None:
        assert evaluate([], _IDS, _index()) == _IDS

    def test_group_without_badges_returns_roster(self) -> None:
        assert evaluate([SearchGroup(id="g1", badges=[])], _IDS, _index()) == _IDS

    def test_blank_badges_count_as_empty(self) -> None:
        assert evaluate([SearchGroup(id="g1", badges=["  ", ""])], _IDS, _index()) == _IDS

    def test_returns_copy(self) -> None:
        result = evaluate([], _IDS, _index())
        assert result is not _IDS


class TestAndOfOr:
    def test_single_term(self) -> None:
        query = [SearchGroup(id="g1", badges=["Rust"])]
        assert evaluate(query, _IDS, _index()) == ["a", "b", "c"]

    def test_or_within_group(self) -> None:
        query = [SearchGroup(id="g1", badges=["Budapest", "Berlin"])]
        assert evaluate(query, _IDS, _index()) == ["a", "b", "d"]

    def test_and_across_groups(self) -> None:
        query = [
            SearchGroup(id="g1", badges=["Rust"]),
            SearchGroup(id="g2", badges=["Budapest", "Berlin"]),
        ]
        assert evaluate(query, _IDS, _index()) == ["a", "b"]

    def test_group_order_irrelevant(self) -> None:
        query = [
            SearchGroup(id="g2", badges=["Berlin", "Budapest"]),
            SearchGroup(id="g1", badges=["Rust"]),
        ]
        assert evaluate(query, _IDS, _index()) == ["a", "b"]

    def test_empty_group_is_vacuous(self) -> None:
        query = [SearchGroup(id="g1", badges=["Rust"]), SearchGroup(id="g2", badges=[])]
        assert evaluate(query, _IDS, _index()) == ["a", "b", "c"]

    def test_short_term_group_matches_nothing(self) -> None:
        assert evaluate([SearchGroup(id="g1", badges=["R"])], _IDS, _index()) == []

    def test_preserves_roster_order(self) -> None:
        query = [SearchGroup(id="g1", badges=["Rust"])]
        assert evaluate(query, ["c", "a", "b"], _index()) == ["c", "a", "b"]


class TestQueryTerms:
    def test_distinct_in_first_seen_order(self) -> None:
        query = [
            SearchGroup(id="g1", badges=["Rust", "Go"]),
            SearchGroup(id="g2", badges=["Go", "Budapest"]),
        ]
        assert query_terms(query) == ["Rust", "Go", "Budapest"]

    def test_empty(self) -> None:
        assert query_terms([]) == []
