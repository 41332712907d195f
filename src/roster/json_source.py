"""Roster source reading a JSON array of professional records from disk."""

import json
import logging
from pathlib import Path
from typing import Any

from src.core.schemas import ProfessionalRecord
from src.roster.base import RosterSource

logger = logging.getLogger(__name__)


class JsonRosterSource(RosterSource):
    """Loads records from a JSON file holding a list of objects.

    Field names follow the storage layer (``full_name``, ``work_experience``,
    ``availableFrom`` ...). Skills, languages and technologies may use the
    legacy ``"Name (level)"`` strings.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def source_id(self) -> str:
        return "json"

    async def load(self) -> list[ProfessionalRecord]:
        if not self._path.exists():
            msg = f"Roster file not found: {self._path}"
            raise FileNotFoundError(msg)
        try:
            raw: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            msg = f"Roster file is not valid JSON: {e}"
            raise ValueError(msg) from e
        if not isinstance(raw, list):
            msg = f"Roster file must contain a JSON array, got {type(raw).__name__}"
            raise ValueError(msg)
        records = [ProfessionalRecord.model_validate(item) for item in raw]
        logger.info("Loaded %d professionals from %s", len(records), self._path)
        return records
