"""Forward scheduling of work orders onto capacity-limited stations.

The engine walks work orders in due-date order and places each operation of a
work order on the station registered for it, no earlier than the end of the
previous operation. A slot is accepted only when it fits inside the working
day and the station still has free capacity for the whole interval. When a
candidate is rejected the operation is pushed to the start of the next working
day; a rejected candidate is never shifted by minutes within the same day.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import DefaultDict, Iterable, List, Sequence, Tuple

from .config import SchedulerSettings
from .domain import Operation, ScheduledTask, Station, WorkOrder
from .errors import NotConfiguredError, UnschedulableError
from .repository import ScheduleStore, StationRegistry, WorkOrderTypeCatalog

logger = logging.getLogger(__name__)


def peak_overlap(
    tasks: Iterable[ScheduledTask], window_start: datetime, window_end: datetime
) -> int:
    """Return the highest number of tasks running at once inside the window.

    Intervals are half-open, so a task ending at ``t`` and another starting at
    ``t`` never count as concurrent.
    """

    events: List[Tuple[datetime, int]] = []
    for task in tasks:
        start = max(task.start, window_start)
        end = min(task.end, window_end)
        if start < end:
            events.append((start, 1))
            events.append((end, -1))
    # Ends sort before starts at the same instant.
    events.sort()
    peak = running = 0
    for _, delta in events:
        running += delta
        peak = max(peak, running)
    return peak


class StagedSchedule:
    """Placements of one scheduling call layered over the shared store.

    Capacity checks see both committed and staged tasks; nothing reaches the
    store until :meth:`commit` is called.
    """

    def __init__(self, store: ScheduleStore, org: str) -> None:
        self._store = store
        self._org = org
        self._staged: DefaultDict[Tuple[str, date], List[ScheduledTask]] = defaultdict(list)
        self._order: List[ScheduledTask] = []

    def tasks_on(self, operation: str, day: date) -> List[ScheduledTask]:
        return self._store.tasks_on(self._org, operation, day) + self._staged[(operation, day)]

    def stage(self, task: ScheduledTask) -> None:
        self._staged[(task.station.operation, task.day)].append(task)
        self._order.append(task)

    def commit(self) -> None:
        for task in self._order:
            self._store.commit(self._org, task.station.operation, task.day, task)
        self._staged.clear()
        self._order = []


class SchedulingEngine:
    """Places work orders on stations and records the resulting tasks."""

    def __init__(
        self,
        settings: SchedulerSettings,
        stations: StationRegistry,
        work_order_types: WorkOrderTypeCatalog,
        schedule: ScheduleStore,
    ) -> None:
        self.settings = settings
        self.stations = stations
        self.work_order_types = work_order_types
        self.schedule = schedule

    def schedule_work_orders(
        self, org: str, work_orders: Sequence[WorkOrder], start_day: date
    ) -> List[ScheduledTask]:
        """Place every operation of ``work_orders`` and commit the result.

        The call is all-or-nothing: if any operation cannot be placed the
        store is left exactly as it was and :class:`UnschedulableError` is
        raised.
        """

        if not self.stations.has_records(org):
            raise NotConfiguredError(f"No stations defined for org={org}")
        if not self.work_order_types.has_records(org):
            raise NotConfiguredError(f"No work order types defined for org={org}")

        staged = StagedSchedule(self.schedule, org)
        result: List[ScheduledTask] = []
        for work_order in sorted(work_orders, key=lambda order: order.due_date):
            operations = self.work_order_types.operations_for(org, work_order.type)
            if not operations:
                logger.warning(
                    "No operations for work order type %s for org %s; skipping work order %s",
                    work_order.type,
                    org,
                    work_order.id,
                )
                continue
            earliest_start = datetime.combine(start_day, self.settings.work_day_start)
            for operation in operations:
                task = self._place_operation(org, work_order, operation, earliest_start, staged)
                staged.stage(task)
                result.append(task)
                earliest_start = task.end

        staged.commit()
        logger.info(
            "Scheduled %d tasks for %d work orders in org %s",
            len(result),
            len(work_orders),
            org,
        )
        return result

    def _place_operation(
        self,
        org: str,
        work_order: WorkOrder,
        operation: Operation,
        earliest_start: datetime,
        staged: StagedSchedule,
    ) -> ScheduledTask:
        station = self.stations.station_for(org, operation.name)
        if station is None:
            logger.warning("No station for operation %s for org %s", operation.name, org)
            raise UnschedulableError(
                f"No station for operation: {operation.name} for org {org}"
            )
        duration = timedelta(minutes=operation.duration_minutes)
        start = self._find_slot(station, earliest_start, duration, staged)
        task = ScheduledTask(
            work_order=work_order,
            operation=station.operation,
            station=station,
            start=start,
            end=start + duration,
        )
        logger.debug(
            "Placed %s/%s on %s at %s-%s",
            work_order.id,
            operation.name,
            station.name,
            task.start.isoformat(timespec="minutes"),
            task.end.strftime("%H:%M"),
        )
        return task

    def _find_slot(
        self,
        station: Station,
        earliest_start: datetime,
        duration: timedelta,
        staged: StagedSchedule,
    ) -> datetime:
        settings = self.settings
        if station.capacity <= 0:
            raise UnschedulableError(
                f"Station {station.name!r} has no capacity (capacity={station.capacity})"
            )
        if duration > timedelta(minutes=settings.work_day_minutes):
            raise UnschedulableError(
                f"Operation on station {station.name!r} takes {duration} which exceeds "
                "the working day"
            )

        day = earliest_start.date()
        time_of_day = earliest_start.time()
        for _ in range(settings.max_day_advances + 1):
            if time_of_day < settings.work_day_start:
                time_of_day = settings.work_day_start
            elif time_of_day >= settings.work_day_end:
                day += timedelta(days=1)
                time_of_day = settings.work_day_start

            candidate = datetime.combine(day, time_of_day)
            day_end = datetime.combine(day, settings.work_day_end)
            if day_end - candidate >= duration:
                tasks = staged.tasks_on(station.operation, day)
                if peak_overlap(tasks, candidate, candidate + duration) < station.capacity:
                    return candidate
                logger.debug(
                    "Station %s is full at %s; moving to next day",
                    station.name,
                    candidate.isoformat(timespec="minutes"),
                )
            day += timedelta(days=1)
            time_of_day = settings.work_day_start

        raise UnschedulableError(
            f"No free slot on station {station.name!r} within "
            f"{settings.max_day_advances} days of {earliest_start:%Y-%m-%d %H:%M}"
        )


__all__ = ["SchedulingEngine", "StagedSchedule", "peak_overlap"]
