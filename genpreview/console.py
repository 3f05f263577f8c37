"""Bounded in-memory console shown next to the preview."""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime
from typing import Callable, Deque, List

from .logging import get_logger
from .models import ConsoleEntry

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ConsoleLog:
    """Keeps the most recent session messages and mirrors them to the logger."""

    def __init__(self, limit: int = 50, *, clock: Callable[[], datetime] | None = None) -> None:
        if limit <= 0:
            raise ValueError("console limit must be positive")
        self.limit = limit
        self._entries: Deque[ConsoleEntry] = deque(maxlen=limit)
        self._clock = clock or (lambda: datetime.now(UTC))
        self.logger = get_logger("console")

    def log(self, message: str, level: str = "info") -> ConsoleEntry:
        if level not in _LEVELS:
            raise ValueError(f"Unknown console level: {level}")
        entry = ConsoleEntry(
            timestamp=self._clock().strftime("%H:%M:%S"),
            message=message,
            level=level,
        )
        self._entries.append(entry)
        self.logger.log(_LEVELS[level], "%s", message)
        return entry

    def info(self, message: str) -> ConsoleEntry:
        return self.log(message, "info")

    def success(self, message: str) -> ConsoleEntry:
        return self.log(message, "success")

    def warning(self, message: str) -> ConsoleEntry:
        return self.log(message, "warning")

    def error(self, message: str) -> ConsoleEntry:
        return self.log(message, "error")

    def entries(self) -> List[ConsoleEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ConsoleLog"]
