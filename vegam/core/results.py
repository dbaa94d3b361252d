from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from vegam.core.config import data_dir
from vegam.core.session import SessionResult

logger = logging.getLogger(__name__)


class ResultStore:
    """Appends finished test results to disk.
    File: ~/.vegam/results.json. Failures are logged and reported, never raised."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or data_dir() / "results.json"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def append(self, result: SessionResult) -> bool:
        """Store ``result``. Returns False if it could not be written."""
        record = result.to_record()
        record["created_at"] = datetime.now(timezone.utc).isoformat()
        records = self.load()
        records.append(record)
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save result to %s: %s", self._file_path, e)
            return False
        return True

    def load(self) -> List[Dict[str, object]]:
        if not self._file_path.exists():
            return []
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load results from %s: %s", self._file_path, e)
            return []
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]
