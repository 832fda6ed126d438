"""Service layer that exposes the scheduler use-cases to clients."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from .config import SchedulerSettings
from .domain import ScheduledTask, Station, WorkOrder, WorkOrderType
from .engine import SchedulingEngine
from .errors import InvalidArgumentError
from .repository import ScheduleStore, StationRegistry, WorkOrderTypeCatalog

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
    """Reporting view of one scheduled task."""

    operation: str
    station: Station
    work_order_id: str
    day: date
    start: str
    end: str


def _require_org(org: Optional[str]) -> str:
    if not org:
        raise InvalidArgumentError("org cannot be null or empty")
    return org


def _validate_station(station: Station) -> None:
    if not station.name:
        raise InvalidArgumentError("Station name cannot be empty")
    if not station.operation:
        raise InvalidArgumentError(f"Station {station.name!r} must name an operation")
    if isinstance(station.capacity, bool) or not isinstance(station.capacity, int):
        raise InvalidArgumentError(
            f"Station {station.name!r} capacity must be an integer"
        )


class SchedulerService:
    """Facade bundling the stores, the scheduling engine and per-org locking.

    Mutations for one organization are serialized by that organization's lock;
    different organizations never wait on each other. :meth:`get_schedule`
    copies each organization's tasks under its lock, so a report never shows
    half of a scheduling call.
    """

    def __init__(
        self,
        settings: Optional[SchedulerSettings] = None,
        *,
        stations: Optional[StationRegistry] = None,
        work_order_types: Optional[WorkOrderTypeCatalog] = None,
        schedule: Optional[ScheduleStore] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings or SchedulerSettings()
        self.stations = stations or StationRegistry()
        self.work_order_types = work_order_types or WorkOrderTypeCatalog()
        self.schedule = schedule or ScheduleStore()
        self.engine = SchedulingEngine(
            self.settings, self.stations, self.work_order_types, self.schedule
        )
        self._clock = clock
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _org_lock(self, org: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(org, threading.RLock())
        with lock:
            yield

    # ------------------------------------------------------------------
    # Master data
    # ------------------------------------------------------------------
    def register_stations(self, org: str, stations: Optional[Sequence[Station]]) -> None:
        org = _require_org(org)
        if not stations:
            raise InvalidArgumentError("Stations list cannot be null or empty")
        for station in stations:
            _validate_station(station)

        with self._org_lock(org):
            self.stations.register(org, stations)
            for station in stations:
                self.schedule.ensure_ledger(org, station.operation)
        logger.info("Registered %d stations for org %s", len(stations), org)

    def register_work_order_types(
        self, org: str, work_order_types: Optional[Sequence[WorkOrderType]]
    ) -> None:
        org = _require_org(org)
        if not work_order_types:
            raise InvalidArgumentError("WorkOrderTypes list cannot be null or empty")
        for work_order_type in work_order_types:
            if not work_order_type.name:
                raise InvalidArgumentError("Work order type name cannot be empty")

        with self._org_lock(org):
            self.work_order_types.register(org, work_order_types)
        logger.info(
            "Registered %d work order types for org %s", len(work_order_types), org
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def schedule_work_orders(
        self,
        org: str,
        work_orders: Sequence[WorkOrder],
        *,
        start_day: Optional[date] = None,
    ) -> List[ScheduledTask]:
        """Schedule ``work_orders`` for ``org`` starting at ``start_day``.

        ``start_day`` defaults to today's date from the service clock.
        """

        org = _require_org(org)
        start_day = start_day or self._clock()
        with self._org_lock(org):
            return self.engine.schedule_work_orders(org, list(work_orders or ()), start_day)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def get_schedule(self) -> Dict[str, List[ScheduleEntry]]:
        """Return every organization's scheduled tasks ordered by start time."""

        report: Dict[str, List[ScheduleEntry]] = {}
        for org in self.schedule.organizations():
            with self._org_lock(org):
                tasks = self.schedule.all_tasks(org)
            if not tasks:
                continue
            tasks.sort(key=lambda task: (task.start, task.station.name, task.work_order.id))
            report[org] = [
                ScheduleEntry(
                    operation=task.operation,
                    station=task.station,
                    work_order_id=task.work_order.id,
                    day=task.day,
                    start=task.start.strftime("%H:%M"),
                    end=task.end.strftime("%H:%M"),
                )
                for task in tasks
            ]
        return report


__all__ = ["SchedulerService", "ScheduleEntry"]
