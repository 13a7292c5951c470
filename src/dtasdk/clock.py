"""Time sources for signing and verification."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock that always reports the same instant. Naive datetimes are taken as UTC."""

    def __init__(self, instant: datetime):
        self.instant = as_utc(instant)

    def now(self) -> datetime:
        return self.instant


class SequenceClock:
    """Clock that reports each of the given instants in turn, repeating the last one."""

    def __init__(self, instants: Iterable[datetime]):
        self._instants: Iterator[datetime] = iter(instants)
        self._last: datetime | None = None

    def now(self) -> datetime:
        try:
            self._last = as_utc(next(self._instants))
        except StopIteration:
            if self._last is None:
                raise ValueError("SequenceClock needs at least one instant") from None
        return self._last


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
