"""Tests for the search projection builder and its extraction strategies."""

from src.core.schemas import ProfessionalRecord
from src.pipeline.codec import EDUCATION_SEPARATOR, WORK_EXPERIENCE_SEPARATOR
from src.pipeline.projection import (
    EXTRACTION_STRATEGIES,
    Projection,
    build_projection,
    extract_after_at,
    extract_before_separator,
    extract_organization_names,
    extract_residual_line,
)


def _blob(*sections: str, summary: str = "Summary") -> str:
    return WORK_EXPERIENCE_SEPARATOR.join([summary, *sections])


class TestExtractAfterAt:
    def test_position_at_company(self) -> None:
        assert extract_after_at("Consultant at Acme Corp, Vienna") == ["Acme Corp"]

    def test_stops_at_parenthesis(self) -> None:
        assert extract_after_at("CFO at Initech (2019 - 2021)") == ["Initech"]

    def test_case_insensitive(self) -> None:
        assert extract_after_at("Lead AT Globex") == ["Globex"]

    def test_at_inside_word_ignored(self) -> None:
        assert extract_after_at("Great leader") == []

    def test_no_match(self) -> None:
        assert extract_after_at("Freelance consulting") == []


class TestExtractBeforeSeparator:
    def test_dash(self) -> None:
        assert extract_before_separator("Acme Corp - Interim CFO") == ["Acme Corp"]

    def test_pipe(self) -> None:
        assert extract_before_separator("Umbrella Holdings | Board member") == ["Umbrella Holdings"]

    def test_numeric_prefix_skipped(self) -> None:
        assert extract_before_separator("2019 - 2021") == []

    def test_single_word_skipped(self) -> None:
        assert extract_before_separator("Acme - CFO") == []

    def test_no_separator(self) -> None:
        assert extract_before_separator("Acme Corp") == []


class TestExtractResidualLine:
    def test_plain_name(self) -> None:
        assert extract_residual_line("Globex Corporation") == ["Globex Corporation"]

    def test_job_title_skipped(self) -> None:
        assert extract_residual_line("Senior Engineer") == []

    def test_dates_skipped(self) -> None:
        assert extract_residual_line("Since 2020") == []
        assert extract_residual_line("until 12/31/21") == []

    def test_length_bounds(self) -> None:
        assert extract_residual_line("abc") == []
        assert extract_residual_line("x" * 100) == []

    def test_colon_and_bullet_skipped(self) -> None:
        assert extract_residual_line("Tasks: budgeting") == []
        assert extract_residual_line("• budgeting") == []


class TestExtractOrganizationNames:
    def test_unions_all_strategies(self) -> None:
        blob = _blob("Umbrella Holdings\nInterim CEO - turnaround", "CFO at Initech (2019 - 2021): x")
        names = extract_organization_names(blob)
        assert "Umbrella Holdings" in names
        assert "Interim CEO" in names
        assert "Initech" in names

    def test_deduplicated(self) -> None:
        blob = _blob("Globex Corporation", "Globex Corporation")
        assert extract_organization_names(blob) == "Globex Corporation"

    def test_summary_not_scanned(self) -> None:
        assert extract_organization_names(_blob(summary="Worked at Hooli")) == ""

    def test_empty(self) -> None:
        assert extract_organization_names("") == ""
        assert extract_organization_names(None) == ""

    def test_custom_strategy_list(self) -> None:
        blob = _blob("Umbrella Holdings")
        assert extract_organization_names(blob, strategies=(extract_after_at,)) == ""

    def test_strategy_order(self) -> None:
        assert EXTRACTION_STRATEGIES == (
            extract_after_at,
            extract_before_separator,
            extract_residual_line,
        )


class TestBuildProjection:
    def test_full_record(self) -> None:
        record = ProfessionalRecord(
            id="p1",
            full_name="Anna Kovacs",
            work_experience=_blob(
                "CFO at Initech (2019 - 2021): Led finance.",
                summary="Turnaround specialist",
            ),
            education=EDUCATION_SEPARATOR.join(["MBA at INSEAD (2010 - 2011)", "BSc at ELTE (2005 - 2008)"]),
            skills=["Rust (expert)", "Go"],
            languages=["Hungarian (native)", "English (C1)"],
            technologies=["PostgreSQL (advanced)"],
        )
        p = build_projection(record)
        assert p.id == "p1"
        assert p.name == "Anna Kovacs"
        assert p.career_text.startswith("Turnaround specialist ")
        assert "Initech" in p.career_text
        assert p.education == "MBA at INSEAD (2010 - 2011) BSc at ELTE (2005 - 2008)"
        assert p.skills == "Rust Go"
        assert p.languages == "Hungarian English"
        assert p.technologies == "PostgreSQL"

    def test_empty_record(self) -> None:
        p = build_projection(ProfessionalRecord(id="p2"))
        assert p == Projection(id="p2")
