from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import AssistantRecord

logger = logging.getLogger(__name__)


class AssistantRegistry:
    """Append-only JSON file of assistants created from this client.

    The file holds a single JSON array of ``{"name", "description"}`` objects.
    It is read and rewritten whole on every append; there is no locking.
    Entries already in the file are written back exactly as they were read,
    whatever their shape.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)

    def _read_entries(self) -> list[Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Registry %s does not exist yet", self.path)
            return []
        except UnicodeDecodeError as exc:
            logger.debug("Ignoring unreadable registry %s: %s", self.path, exc)
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Ignoring unreadable registry %s: %s", self.path, exc)
            return []
        if not isinstance(entries, list):
            logger.debug("Ignoring registry %s: top-level value is not an array", self.path)
            return []
        return entries

    @staticmethod
    def _decode(entries: list[Any]) -> list[AssistantRecord]:
        records = []
        for index, entry in enumerate(entries):
            try:
                records.append(AssistantRecord.model_validate(entry))
            except ValidationError as exc:
                logger.debug("Skipping registry entry %d: %s", index, exc)
        return records

    def load(self) -> list[AssistantRecord]:
        """Read the registry; a missing or unreadable file counts as empty.

        Entries that are not ``{name, description}`` objects are skipped.
        """
        return self._decode(self._read_entries())

    def append(self, record: AssistantRecord) -> list[AssistantRecord]:
        """Add ``record`` to the end of the registry and rewrite the file.

        Returns:
            list[AssistantRecord]: The readable records now stored, in insertion order.
        """
        entries = self._read_entries()
        entries.append(record.model_dump(mode="json"))
        self.path.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")
        logger.debug("Registry %s now holds %d entries", self.path, len(entries))
        return self._decode(entries)
