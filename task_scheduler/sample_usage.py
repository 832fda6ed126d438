"""Demonstration script for the station task scheduler."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from . import (
    Operation,
    SchedulerService,
    SchedulerSettings,
    Station,
    WorkOrder,
    WorkOrderType,
)


def main(start_day: Optional[date] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    scheduler = SchedulerService(SchedulerSettings.from_strings("07:00", "16:00"))
    start_day = start_day or date.today()

    # Master data
    scheduler.register_stations(
        "acme",
        [
            Station(name="Paint Booth", operation="Paint", capacity=2),
            Station(name="Drying Oven", operation="Dry", capacity=1),
            Station(name="Assembly Line", operation="Assemble", capacity=3),
        ],
    )
    scheduler.register_work_order_types(
        "acme",
        [
            WorkOrderType(
                name="Cabinet",
                operations=[
                    Operation(name="Assemble", duration_hours=2.0),
                    Operation(name="Paint", duration_hours=1.0),
                    Operation(name="Dry", duration_hours=1.5),
                ],
            ),
            WorkOrderType(name="Touch-up", operations=[Operation(name="Paint", duration_hours=0.5)]),
        ],
    )

    # Work orders
    work_orders = [
        WorkOrder(id="WO-100", type="Cabinet", due_date=start_day + timedelta(days=3)),
        WorkOrder(id="WO-101", type="Touch-up", due_date=start_day + timedelta(days=1)),
        WorkOrder(id="WO-102", type="Cabinet", due_date=start_day + timedelta(days=2)),
        WorkOrder(id="WO-103", type="Cabinet", due_date=start_day + timedelta(days=2)),
    ]
    scheduler.schedule_work_orders("acme", work_orders, start_day=start_day)

    print("Schedule")
    for org, entries in scheduler.get_schedule().items():
        print(f" {org}")
        for entry in entries:
            print(
                f"  - {entry.day:%d.%m} {entry.start}-{entry.end}"
                f"  {entry.station.name:<14} {entry.operation:<9} {entry.work_order_id}"
            )


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
