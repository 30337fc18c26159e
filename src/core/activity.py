"""Process-wide, append-only activity log shared by the engine and the runner."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

log = logging.getLogger("activity")


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    message: str

    def render(self) -> str:
        return f"[{self.timestamp.isoformat(timespec='seconds')}] {self.message}"


class ActivityLog:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[LogEntry] = []

    def append(self, message: str) -> LogEntry:
        with self._lock:
            entry = LogEntry(timestamp=datetime.now(timezone.utc), message=message)
            self._entries.append(entry)
        log.info("%s", message)
        return entry

    def entries(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


activity_log = ActivityLog()
