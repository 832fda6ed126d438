"""In-memory, organization-partitioned stores used by the scheduler service."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import DefaultDict, Dict, Generic, Iterable, List, Optional, TypeVar

from .domain import Operation, ScheduledTask, Station, WorkOrderType

T = TypeVar("T")


class OrgScopedRepository(Generic[T]):
    """Generic repository holding one dictionary of records per organization."""

    def __init__(self) -> None:
        self._items: Dict[str, Dict[str, T]] = {}

    def has_records(self, org: str) -> bool:
        return bool(self._items.get(org))

    def upsert(self, org: str, key: str, item: T) -> None:
        self._items.setdefault(org, {})[key] = item

    def get(self, org: str, key: str) -> Optional[T]:
        return self._items.get(org, {}).get(key)

    def remove(self, org: str, key: str) -> None:
        self._items.get(org, {}).pop(key, None)


class StationRegistry(OrgScopedRepository[Station]):
    """Maps each organization's operation names to the station performing them."""

    def register(self, org: str, stations: Iterable[Station]) -> None:
        for station in stations:
            self.upsert(org, station.operation, station)

    def station_for(self, org: str, operation: str) -> Optional[Station]:
        return self.get(org, operation)


class WorkOrderTypeCatalog(OrgScopedRepository[List[Operation]]):
    """Accumulates the ordered operation list of every work-order type."""

    def register(self, org: str, work_order_types: Iterable[WorkOrderType]) -> None:
        for work_order_type in work_order_types:
            if not work_order_type.operations:
                self.remove(org, work_order_type.name)
                continue
            existing = self.get(org, work_order_type.name)
            if existing is None:
                existing = []
                self.upsert(org, work_order_type.name, existing)
            existing.extend(work_order_type.operations)

    def operations_for(self, org: str, type_name: str) -> List[Operation]:
        return list(self.get(org, type_name) or ())


DayLedger = DefaultDict[date, List[ScheduledTask]]


class ScheduleStore:
    """Placed tasks indexed by organization, operation and calendar day.

    Tasks are only ever appended. Reads return copies so callers can iterate
    them while another thread commits into the same ledger.
    """

    def __init__(self) -> None:
        self._ledgers: Dict[str, Dict[str, DayLedger]] = {}

    def organizations(self) -> List[str]:
        return list(self._ledgers)

    def ensure_ledger(self, org: str, operation: str) -> None:
        self._ledgers.setdefault(org, {}).setdefault(operation, defaultdict(list))

    def commit(self, org: str, operation: str, day: date, task: ScheduledTask) -> None:
        self.ensure_ledger(org, operation)
        self._ledgers[org][operation][day].append(task)

    def tasks_on(self, org: str, operation: str, day: date) -> List[ScheduledTask]:
        ledger = self._ledgers.get(org, {}).get(operation)
        if ledger is None or day not in ledger:
            return []
        return list(ledger[day])

    def all_tasks(self, org: str) -> List[ScheduledTask]:
        tasks: List[ScheduledTask] = []
        for ledger in list(self._ledgers.get(org, {}).values()):
            for day_tasks in list(ledger.values()):
                tasks.extend(day_tasks)
        return tasks


__all__ = [
    "OrgScopedRepository",
    "StationRegistry",
    "WorkOrderTypeCatalog",
    "ScheduleStore",
]
