"""Importer for JSON session records."""

import json
import logging
from typing import Any

from timetable.models import Session

from .base import BaseImporter
from .weeks import parse_weeks

logger = logging.getLogger(__name__)


class JsonImporter(BaseImporter):
    """Loads a JSON array of plain session records.
    
    Records use the keys produced by ``Session.to_dict``; week lists may
    also be given as annotations such as ``"1-16 odd"``.
    """
    
    def __init__(self, skip_invalid: bool = True) -> None:
        """Initialize the importer.
        
        Args:
            skip_invalid: Log and skip bad records instead of raising.
        """
        self._skip_invalid = skip_invalid
    
    def parse_records(self, records: Any) -> list[Session]:
        """Convert decoded JSON into sessions.
        
        Raises:
            ValueError: If ``records`` is not a list, or a record is invalid
                and ``skip_invalid`` is off.
        """
        if not isinstance(records, list):
            raise ValueError("Session data must be a JSON array")
        
        sessions: list[Session] = []
        for index, record in enumerate(records):
            try:
                if not isinstance(record, dict):
                    raise ValueError(f"Record {index} is not an object")
                record = dict(record)
                for key in ("activeWeeks", "active_weeks", "weeks"):
                    if isinstance(record.get(key), str):
                        record[key] = parse_weeks(record[key])
                sessions.append(Session.from_dict(record))
            except (TypeError, ValueError) as e:
                if not self._skip_invalid:
                    raise ValueError(f"Invalid session record {index}: {e}") from e
                logger.warning("Skipping invalid session record %d: %s", index, e)
        return sessions
    
    def load(self, source: str) -> list[Session]:
        with open(source, encoding="utf-8") as f:
            records = json.load(f)
        return self.parse_records(records)
