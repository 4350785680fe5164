from datetime import timedelta

from django.utils import timezone


class Clock:
    """Source of the current time for rules that depend on it."""

    def now(self):
        return timezone.now()


class FixedClock(Clock):
    """Clock pinned to a given instant. Used by tests."""

    def __init__(self, instant):
        self.instant = instant

    def now(self):
        return self.instant

    def set(self, instant):
        self.instant = instant

    def advance(self, **kwargs):
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant


system_clock = Clock()
