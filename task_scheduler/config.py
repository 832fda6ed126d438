"""Process-wide scheduler settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Union

from .errors import InvalidArgumentError

DEFAULT_WORK_DAY_START = time(7, 0)
DEFAULT_WORK_DAY_END = time(16, 0)
DEFAULT_MAX_DAY_ADVANCES = 366

WORK_DAY_START_ENV = "SCHEDULER_WORK_DAY_START"
WORK_DAY_END_ENV = "SCHEDULER_WORK_DAY_END"
MAX_DAY_ADVANCES_ENV = "SCHEDULER_MAX_DAY_ADVANCES"


def parse_time_of_day(value: Union[str, time]) -> time:
    """Parse an ``HH:MM`` string into a :class:`datetime.time`."""

    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid time of day {value!r}, expected HH:MM") from exc


@dataclass(slots=True, frozen=True)
class SchedulerSettings:
    """Working-day window and retry bound used by the scheduling engine."""

    work_day_start: time = field(default_factory=lambda: DEFAULT_WORK_DAY_START)
    work_day_end: time = field(default_factory=lambda: DEFAULT_WORK_DAY_END)
    max_day_advances: int = DEFAULT_MAX_DAY_ADVANCES

    def __post_init__(self) -> None:
        if self.work_day_start >= self.work_day_end:
            raise InvalidArgumentError("Working day must start before it ends")
        if self.max_day_advances <= 0:
            raise InvalidArgumentError("max_day_advances must be positive")

    @property
    def work_day_minutes(self) -> int:
        start = self.work_day_start.hour * 60 + self.work_day_start.minute
        end = self.work_day_end.hour * 60 + self.work_day_end.minute
        return end - start

    @classmethod
    def from_strings(
        cls,
        work_day_start: str,
        work_day_end: str,
        max_day_advances: int = DEFAULT_MAX_DAY_ADVANCES,
    ) -> "SchedulerSettings":
        return cls(
            work_day_start=parse_time_of_day(work_day_start),
            work_day_end=parse_time_of_day(work_day_end),
            max_day_advances=max_day_advances,
        )

    @classmethod
    def from_env(cls) -> "SchedulerSettings":
        """Build settings from ``SCHEDULER_*`` environment variables."""

        max_day_advances = os.getenv(MAX_DAY_ADVANCES_ENV)
        try:
            advances = int(max_day_advances) if max_day_advances else DEFAULT_MAX_DAY_ADVANCES
        except ValueError as exc:
            raise InvalidArgumentError(
                f"{MAX_DAY_ADVANCES_ENV} must be an integer, got {max_day_advances!r}"
            ) from exc
        return cls.from_strings(
            os.getenv(WORK_DAY_START_ENV, DEFAULT_WORK_DAY_START.strftime("%H:%M")),
            os.getenv(WORK_DAY_END_ENV, DEFAULT_WORK_DAY_END.strftime("%H:%M")),
            advances,
        )


__all__ = ["SchedulerSettings", "parse_time_of_day"]
