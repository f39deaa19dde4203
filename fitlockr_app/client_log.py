"""Daily JSON log files for entries posted by the browser client."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List

from fitlockr_app.logging_config import get_logger

LOGGER = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClientLogWriter:
    """Append client log entries to ``<log_dir>/<prefix>-YYYY-MM-DD.json``.

    Each file holds a JSON array; a new file starts every UTC day.
    """

    def __init__(
        self,
        log_dir: str | Path = "logs",
        prefix: str = "fitlockrLog",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()

    def path_for(self, moment: datetime) -> Path:
        return self.log_dir / f"{self.prefix}-{moment.date().isoformat()}.json"

    def _read(self, path: Path) -> List[Dict[str, Any]]:
        if not path.exists():
            return []
        raw = path.read_text(encoding="utf-8")
        try:
            existing = json.loads(raw or "[]")
        except json.JSONDecodeError:
            LOGGER.warning("Client log file is not valid JSON, starting over", extra={"path": str(path)})
            return []
        return existing if isinstance(existing, list) else []

    def write(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        """Append ``entry`` stamped with the current time and return the stored record."""

        now = self._clock()
        record = {"timestamp": now.isoformat(), **entry}
        path = self.path_for(now)
        with self._lock:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            entries = self._read(path)
            entries.append(record)
            path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        return record


__all__ = ["ClientLogWriter"]
