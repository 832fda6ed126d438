from datetime import date, datetime, time, timedelta

import pytest

from task_scheduler import (
    Operation,
    SchedulerService,
    SchedulerSettings,
    Station,
    WorkOrderType,
)

START_DAY = date(2024, 3, 4)


@pytest.fixture
def start_day() -> date:
    return START_DAY


@pytest.fixture
def settings() -> SchedulerSettings:
    return SchedulerSettings.from_strings("07:00", "16:00")


@pytest.fixture
def service(settings: SchedulerSettings) -> SchedulerService:
    return SchedulerService(settings, clock=lambda: START_DAY)


@pytest.fixture
def paint_service(service: SchedulerService) -> SchedulerService:
    """Org ``acme`` with one Paint station of capacity 2 and type T1 = [Paint 1h]."""
    service.register_stations("acme", [Station(name="Paint", operation="Paint", capacity=2)])
    service.register_work_order_types(
        "acme", [WorkOrderType(name="T1", operations=[Operation(name="Paint", duration_hours=1.0)])]
    )
    return service


@pytest.fixture
def at():
    """Build a datetime ``day_offset`` days after the start day at ``HH:MM``."""

    def build(day_offset: int, clock: str) -> datetime:
        hours, minutes = (int(part) for part in clock.split(":"))
        return datetime.combine(START_DAY + timedelta(days=day_offset), time(hours, minutes))

    return build
