"""JSON file persistence for the local dataset."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pyccsync.exceptions import CcPersistenceError
from pyccsync.models.observation import Observation

_logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[Observation])


class JsonFileRepository:
    """Stores a dataset as a JSON array of records, newest first.

    The file layout is the remote source's own record shape, so each entry
    keeps its ``time`` key and every passthrough field.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[Observation]:
        """Return the persisted dataset, or an empty list.

        A missing, unreadable or malformed file is not an error: the run
        simply starts from scratch.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _logger.info("No preexisting file found at %s", self.path)
            return []
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning("Could not read %s, starting empty: %s", self.path, exc)
            return []

        try:
            records: Any = json.loads(text)
            observations = _RECORDS.validate_python(records)
        except (json.JSONDecodeError, ValidationError) as exc:
            _logger.warning("Corrupted file %s, starting empty: %s", self.path, exc)
            return []

        _logger.info("Loaded %s (%d observations)", self.path, len(observations))
        return observations

    def save(self, dataset: Sequence[Observation]) -> None:
        """Overwrite the persisted dataset.

        The new content is written to a sibling file first and moved into
        place, so the previous file stays intact when writing fails.

        Raises
        ------
        CcPersistenceError
            If the file cannot be written.
        """
        content = json.dumps([o.to_record() for o in dataset], indent=2)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise CcPersistenceError(f"Could not save {self.path}: {exc}", path=str(self.path)) from exc
        _logger.info("saved %s", self.path)
