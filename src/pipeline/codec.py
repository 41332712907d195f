"""Composite-field codec for career history blobs.

Work history and education are persisted as one flat string per record:
sections joined by a reserved separator that never occurs in prose.

  work history: "<summary>" SEP "<position> at <company> (<duration>): <description>" SEP ...
  education:    "<degree> at <school> (<duration>)" SEP ...

Sections that do not match the entry shape are dropped from the structured
view but stay in the raw blob.
"""

import logging
import re
from typing import Literal

from src.core.schemas import CareerEntry, EducationEntry, Proficiency

logger = logging.getLogger(__name__)

WORK_EXPERIENCE_SEPARATOR = "|||WORK_EXP_SEPARATOR|||"
EDUCATION_SEPARATOR = "|||EDU_SEPARATOR|||"

CareerKind = Literal["work", "education"]

_WORK_ENTRY_RE = re.compile(
    r"^(?P<position>.+?)\s+at\s+(?P<company>.+?)\s+\((?P<duration>[^)]*)\):\s?(?P<description>.*)$",
    re.DOTALL,
)
_EDUCATION_ENTRY_RE = re.compile(
    r"^(?P<degree>.+?)\s+at\s+(?P<school>.+?)\s+\((?P<duration>[^)]*)\)$",
    re.DOTALL,
)
_START_YEAR_RE = re.compile(r"^\s*(\d{4})")


# ---------------------------------------------------------------------------
# Work history
# ---------------------------------------------------------------------------


def encode_work_history(summary: str, entries: list[CareerEntry]) -> str:
    """Join the summary (section 0) and rendered entries with the work separator."""
    sections = [summary] + [
        f"{e.position} at {e.company} ({e.duration}): {e.description}" for e in entries
    ]
    return WORK_EXPERIENCE_SEPARATOR.join(sections)


def split_work_sections(blob: str | None) -> tuple[str, list[str]]:
    """Return (summary, raw entry sections) without parsing the entries."""
    if not blob:
        return "", []
    sections = blob.split(WORK_EXPERIENCE_SEPARATOR)
    return sections[0], sections[1:]


def decode_work_history(blob: str | None) -> tuple[str, list[CareerEntry]]:
    """Split a work-history blob into its summary and the entries that parse."""
    summary, sections = split_work_sections(blob)
    entries: list[CareerEntry] = []
    for section in sections:
        match = _WORK_ENTRY_RE.match(section.strip())
        if match is None:
            logger.debug("Dropping unparseable work section: %.40r", section)
            continue
        entries.append(
            CareerEntry(
                position=match.group("position").strip(),
                company=match.group("company").strip(),
                duration=match.group("duration").strip(),
                description=match.group("description").strip(),
            )
        )
    return summary, entries


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------


def encode_education(entries: list[EducationEntry]) -> str:
    return EDUCATION_SEPARATOR.join(f"{e.degree} at {e.school} ({e.duration})" for e in entries)


def decode_education(blob: str | None) -> list[EducationEntry]:
    """Parse an education blob, most recent start year first.

    Entries without a leading 4-digit year in their duration sort last.
    """
    if not blob:
        return []
    entries: list[EducationEntry] = []
    for section in blob.split(EDUCATION_SEPARATOR):
        if not section.strip():
            continue
        match = _EDUCATION_ENTRY_RE.match(section.strip())
        if match is None:
            logger.debug("Dropping unparseable education section: %.40r", section)
            continue
        entries.append(
            EducationEntry(
                degree=match.group("degree").strip(),
                school=match.group("school").strip(),
                duration=match.group("duration").strip(),
            )
        )
    return sorted(entries, key=_education_sort_key)


def _education_sort_key(entry: EducationEntry) -> tuple[int, int]:
    match = _START_YEAR_RE.match(entry.duration)
    if match is None:
        return (1, 0)
    return (0, -int(match.group(1)))


# ---------------------------------------------------------------------------
# Dispatch and proficiency edge encoding
# ---------------------------------------------------------------------------


def decode_career(kind: CareerKind, blob: str | None) -> list[CareerEntry] | list[EducationEntry]:
    """Decode the structured entries of a blob. The work summary is discarded."""
    if kind == "work":
        return decode_work_history(blob)[1]
    if kind == "education":
        return decode_education(blob)
    msg = f"Unknown career kind '{kind}'. Expected 'work' or 'education'"
    raise ValueError(msg)


def encode_career(
    kind: CareerKind,
    entries: list[CareerEntry] | list[EducationEntry],
    summary: str = "",
) -> str:
    """Encode entries of either kind. ``summary`` applies to work history only."""
    if kind == "work":
        return encode_work_history(summary, entries)  # type: ignore[arg-type]
    if kind == "education":
        return encode_education(entries)  # type: ignore[arg-type]
    msg = f"Unknown career kind '{kind}'. Expected 'work' or 'education'"
    raise ValueError(msg)


def parse_proficiency(text: str) -> Proficiency:
    return Proficiency.parse(text)


def format_proficiency(item: Proficiency) -> str:
    return item.to_legacy()
