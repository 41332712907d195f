"""Search projection: a flat, string-only view of a record for fuzzy indexing.

Organization names are guessed from the raw work-history sections by an
ordered tuple of independent extraction strategies (EXTRACTION_STRATEGIES).
Every strategy runs on every line and the matches are unioned. False
positives are acceptable: the output only feeds the fuzzy index.
"""

import logging
import re
from collections.abc import Callable

from pydantic import BaseModel

from src.core.schemas import ProfessionalRecord, Proficiency
from src.pipeline.codec import EDUCATION_SEPARATOR, split_work_sections

logger = logging.getLogger(__name__)

# A strategy maps one trimmed line to zero or more candidate names.
ExtractionStrategy = Callable[[str], list[str]]

_AT_RE = re.compile(r"\bat\s+([^,\n\r(]+)", re.IGNORECASE)
_BEFORE_SEPARATOR_RE = re.compile(r"^([^-|]+)[-|]")
_LEADING_DIGITS_RE = re.compile(r"^\d+")
_DATE_RE = re.compile(r"\d{4}|\d{1,2}/\d{1,2}/\d{2,4}")
_JOB_TITLE_RE = re.compile(
    r"^(manager|director|consultant|analyst|developer|engineer|specialist"
    r"|coordinator|assistant|lead|senior|junior)",
    re.IGNORECASE,
)

PROJECTION_FIELDS = ("name", "career_text", "education", "skills", "technologies", "languages")


class Projection(BaseModel):
    """Weighted text fields of one record, ready for indexing."""

    id: str
    name: str = ""
    career_text: str = ""
    education: str = ""
    skills: str = ""
    technologies: str = ""
    languages: str = ""


def extract_after_at(line: str) -> list[str]:
    """'Consultant at Acme Corp, Vienna' -> ['Acme Corp']."""
    match = _AT_RE.search(line)
    if match is None:
        return []
    name = match.group(1).strip()
    return [name] if name else []


def extract_before_separator(line: str) -> list[str]:
    """'Acme Corp - Interim CFO' -> ['Acme Corp'].

    Skips numeric prefixes (date ranges) and single words.
    """
    match = _BEFORE_SEPARATOR_RE.match(line)
    if match is None:
        return []
    candidate = match.group(1).strip()
    if len(candidate) > 2 and not _LEADING_DIGITS_RE.match(candidate) and " " in candidate:
        return [candidate]
    return []


def extract_residual_line(line: str) -> list[str]:
    """Keep a whole line that is plausibly just an organization name."""
    if (
        _DATE_RE.search(line)
        or _JOB_TITLE_RE.match(line)
        or not 3 < len(line) < 100
        or ":" in line
        or "•" in line
    ):
        return []
    return [line]


EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    extract_after_at,
    extract_before_separator,
    extract_residual_line,
)


def extract_organization_names(
    work_experience: str | None,
    strategies: tuple[ExtractionStrategy, ...] = EXTRACTION_STRATEGIES,
) -> str:
    """Union of all strategy matches over all entry lines, de-duplicated, space-joined."""
    _, sections = split_work_sections(work_experience)
    names: dict[str, None] = {}
    for section in sections:
        for raw_line in section.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            for strategy in strategies:
                for name in strategy(line):
                    names.setdefault(name, None)
    return " ".join(names)


def _join_names(items: list[Proficiency]) -> str:
    return " ".join(item.name for item in items if item.name)


def build_projection(record: ProfessionalRecord) -> Projection:
    """Flatten a record into its searchable projection."""
    summary, _ = split_work_sections(record.work_experience)
    organizations = extract_organization_names(record.work_experience)
    career_text = " ".join(part for part in (summary.strip(), organizations) if part)
    education = " ".join(
        s.strip() for s in record.education.split(EDUCATION_SEPARATOR) if s.strip()
    )
    projection = Projection(
        id=record.id,
        name=record.full_name,
        career_text=career_text,
        education=education,
        skills=_join_names(record.skills),
        technologies=_join_names(record.technologies),
        languages=_join_names(record.languages),
    )
    logger.debug("Projection for %s: %d chars of career text", record.id, len(career_text))
    return projection
