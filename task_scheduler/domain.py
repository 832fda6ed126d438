"""Core data structures for the station task scheduler."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List

from .errors import InvalidArgumentError


@dataclass(slots=True, frozen=True)
class Station:
    """A capacity-limited resource that performs exactly one operation.

    Stations compare by value, so re-registering an identical station is a
    no-op as far as equality is concerned.
    """

    name: str
    operation: str
    capacity: int


@dataclass(slots=True)
class Operation:
    """A named unit of work with a fixed duration."""

    name: str
    duration_hours: float

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Operation name cannot be empty")
        if self.duration_hours <= 0:
            raise InvalidArgumentError(
                f"Operation {self.name!r} must have a positive duration"
            )

    @property
    def duration_minutes(self) -> int:
        return math.ceil(self.duration_hours * 60)


@dataclass(slots=True)
class WorkOrderType:
    """Ordered template of operations shared by work orders of one type."""

    name: str
    operations: List[Operation] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class WorkOrder:
    """A concrete job referencing a work-order type and a due date."""

    id: str
    type: str
    due_date: date


@dataclass(slots=True, frozen=True)
class ScheduledTask:
    """Committed placement of one operation of a work order on a station."""

    work_order: WorkOrder
    operation: str
    station: Station
    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


__all__ = [
    "Station",
    "Operation",
    "WorkOrderType",
    "WorkOrder",
    "ScheduledTask",
]
