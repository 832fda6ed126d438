"""Capacity-aware scheduling of work orders onto organization stations.

This package provides the data model, in-memory stores, the forward
scheduling engine and a FastAPI front end for assigning the operations of
customer work orders to capacity-limited stations within a daily working
window.
"""

from .config import SchedulerSettings
from .domain import (
    Operation,
    ScheduledTask,
    Station,
    WorkOrder,
    WorkOrderType,
)
from .errors import (
    InvalidArgumentError,
    NotConfiguredError,
    ParseFailureError,
    SchedulerError,
    UnschedulableError,
)
from .services import ScheduleEntry, SchedulerService

__all__ = [
    "Operation",
    "ScheduledTask",
    "Station",
    "WorkOrder",
    "WorkOrderType",
    "SchedulerSettings",
    "SchedulerService",
    "ScheduleEntry",
    "SchedulerError",
    "InvalidArgumentError",
    "NotConfiguredError",
    "ParseFailureError",
    "UnschedulableError",
]
