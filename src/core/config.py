"""Configuration models and YAML loader for the professional search engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from src.core.schemas import RankingMode


class FieldWeights(BaseModel):
    """Relative influence of each projection field on the match score."""

    name: float = Field(default=2.0, gt=0.0)
    career_text: float = Field(default=3.0, gt=0.0)
    education: float = Field(default=3.0, gt=0.0)
    skills: float = Field(default=2.5, gt=0.0)
    technologies: float = Field(default=2.0, gt=0.0)
    languages: float = Field(default=1.5, gt=0.0)


class MatcherConfig(BaseModel):
    """Fuzzy matcher tuning.

    ``threshold`` is the highest score (0 = exact, 1 = no match) a record may
    have for a term and still be accepted.
    """

    threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    min_match_length: int = Field(default=2, ge=1)
    weights: FieldWeights = Field(default_factory=FieldWeights)


class GeocoderConfig(BaseModel):
    """External geocoding collaborator (OpenStreetMap Nominatim)."""

    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "professional-search-engine/0.1"
    timeout_s: float = Field(default=10.0, gt=0.0)
    max_concurrency: int = Field(default=4, ge=1, le=32)

    @field_validator("user_agent")
    @classmethod
    def user_agent_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "user_agent must not be empty (Nominatim rejects anonymous clients)"
            raise ValueError(msg)
        return v.strip()


class DatabaseConfig(BaseModel):
    """Database configuration for the coordinate/distance caches."""

    path: str = "data/geocache.db"


class RankingConfig(BaseModel):
    """Ranking defaults."""

    default_mode: RankingMode = RankingMode.ALPHABETICAL


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
