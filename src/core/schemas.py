"""Core data models for the professional search engine."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Legacy storage encodes proficiency as "Name (level)".
_PROFICIENCY_RE = re.compile(r"^\s*(?P<name>.+?)\s*\((?P<level>[^)]*)\)?\s*$")


class RankingMode(str, Enum):
    """Ordering applied to a filtered result set."""

    ALPHABETICAL = "alphabetical"
    RELEVANCE = "relevance"
    DISTANCE = "distance"
    AVAILABILITY = "availability"


class Proficiency(BaseModel):
    """A skill, language or technology with an optional proficiency level."""

    model_config = ConfigDict(frozen=True)

    name: str
    level: str | None = None

    @classmethod
    def parse(cls, text: str) -> "Proficiency":
        """Parse the legacy ``"Rust (expert)"`` form. Text without a level keeps the whole string."""
        match = _PROFICIENCY_RE.match(text)
        if match is None:
            return cls(name=text.strip())
        level = match.group("level").strip()
        return cls(name=match.group("name").strip(), level=level or None)

    def to_legacy(self) -> str:
        if self.level:
            return f"{self.name} ({self.level})"
        return self.name


class ProfessionalRecord(BaseModel):
    """A professional as supplied by the roster source.

    Frozen: ranking wraps records in RankedProfessional, never mutates them.
    ``available_from`` is only meaningful while ``available`` is False, use
    ``effective_available_from`` rather than reading it directly.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str = ""
    work_experience: str = ""
    education: str = ""
    skills: list[Proficiency] = Field(default_factory=list)
    languages: list[Proficiency] = Field(default_factory=list)
    technologies: list[Proficiency] = Field(default_factory=list)
    city: str = ""
    available: bool = False
    available_from: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("available_from", "availableFrom", "availablefrom"),
    )

    @field_validator("full_name", "work_experience", "education", "city", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("skills", "languages", "technologies", mode="before")
    @classmethod
    def parse_legacy_proficiencies(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [Proficiency.parse(item) if isinstance(item, str) else item for item in v]
        return v

    @field_validator("available_from")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def effective_available_from(self) -> datetime | None:
        """The availability date, or None when the professional is available now."""
        if self.available:
            return None
        return self.available_from


class CareerEntry(BaseModel):
    """One structured work-history entry."""

    position: str
    company: str
    duration: str
    description: str = ""


class EducationEntry(BaseModel):
    """One structured education entry."""

    degree: str
    school: str
    duration: str


class SearchGroup(BaseModel):
    """Terms (badges) ORed together; groups of a query are ANDed."""

    id: str = ""
    badges: list[str] = Field(default_factory=list)

    @field_validator("badges")
    @classmethod
    def drop_blank_badges(cls, v: list[str]) -> list[str]:
        return [b.strip() for b in v if b.strip()]


class MatchResult(BaseModel):
    """Fuzzy match outcome for one (term, record) pair. Lower score is better."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    term: str
    score: float = Field(ge=0.0, le=1.0)
    accepted: bool


class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class RankedProfessional(BaseModel):
    """Wrapper that pairs a frozen ProfessionalRecord with its ranking inputs."""

    model_config = ConfigDict(frozen=True)

    record: ProfessionalRecord
    distance_km: float | None = None
    relevance: float | None = None
