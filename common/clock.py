"""
Clock abstraction.

Services never call ``timezone.now()`` directly; they take a ``clock`` or use
``get_clock()`` so that tests can pin "now" with ``FixedClock``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date, datetime, timedelta

from django.utils import timezone


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current aware datetime."""

    def today(self) -> date:
        return timezone.localtime(self.now()).date()


class SystemClock(Clock):

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """Deterministic clock for tests and replays."""

    def __init__(self, fixed: datetime):
        if timezone.is_naive(fixed):
            fixed = timezone.make_aware(fixed)
        self._now = fixed

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        self._now = value

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


_clock: Clock = SystemClock()


def get_clock() -> Clock:
    return _clock


def set_clock(clock: Clock) -> None:
    global _clock
    _clock = clock


@contextmanager
def use_clock(clock: Clock):
    previous = get_clock()
    set_clock(clock)
    try:
        yield clock
    finally:
        set_clock(previous)
