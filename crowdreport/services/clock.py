"""
Clock and id-generator seams.

Business rules never call datetime.now() or uuid4() directly; the engine is
handed a Clock and an IdGenerator so time windows and ids are reproducible.
"""
from __future__ import annotations

import itertools
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """Settable clock for tests and replays."""

    def __init__(self, start: Optional[datetime] = None):
        start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._now = start if start.tzinfo else start.replace(tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


class IdGenerator(Protocol):
    def new(self, prefix: str) -> str: ...


class UuidIdGenerator:
    def new(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex}"


class SequentialIdGenerator:
    """Deterministic ids: report-0001, report-0002, event-0001, ..."""

    def __init__(self):
        self._counters: Dict[str, itertools.count] = {}
        self._lock = threading.Lock()

    def new(self, prefix: str) -> str:
        with self._lock:
            counter = self._counters.setdefault(prefix, itertools.count(1))
            return f"{prefix}-{next(counter):04d}"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; stored timestamps are always aware."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
