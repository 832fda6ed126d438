import threading
from datetime import date, timedelta

import pytest

from task_scheduler import (
    InvalidArgumentError,
    NotConfiguredError,
    Operation,
    Station,
    WorkOrder,
    WorkOrderType,
)

DUE = date(2024, 3, 20)


def order(order_id, type_name="T1", due=DUE):
    return WorkOrder(id=order_id, type=type_name, due_date=due)


@pytest.mark.parametrize("org", ["", None])
def test_register_stations_requires_org(service, org):
    with pytest.raises(InvalidArgumentError):
        service.register_stations(org, [Station(name="Paint", operation="Paint", capacity=1)])


@pytest.mark.parametrize("stations", [[], None])
def test_register_stations_requires_stations(service, stations):
    with pytest.raises(InvalidArgumentError):
        service.register_stations("acme", stations)


def test_invalid_station_rejects_whole_batch(service):
    with pytest.raises(InvalidArgumentError):
        service.register_stations(
            "acme",
            [
                Station(name="Paint", operation="Paint", capacity=1),
                Station(name="Dry", operation="Dry", capacity="2"),
            ],
        )

    assert not service.stations.has_records("acme")


@pytest.mark.parametrize("types", [[], None])
def test_register_work_order_types_requires_types(service, types):
    with pytest.raises(InvalidArgumentError):
        service.register_work_order_types("acme", types)


def test_unnamed_work_order_type_rejects_whole_batch(service):
    with pytest.raises(InvalidArgumentError):
        service.register_work_order_types(
            "acme",
            [
                WorkOrderType(name="T1", operations=[Operation("Paint", 1.0)]),
                WorkOrderType(name="", operations=[Operation("Paint", 1.0)]),
            ],
        )

    assert not service.work_order_types.has_records("acme")


def test_schedule_requires_org(paint_service):
    with pytest.raises(InvalidArgumentError):
        paint_service.schedule_work_orders("", [order("A")])


def test_removing_last_type_leaves_org_unconfigured(paint_service):
    paint_service.register_work_order_types("acme", [WorkOrderType(name="T1", operations=[])])

    with pytest.raises(NotConfiguredError):
        paint_service.schedule_work_orders("acme", [order("A")])


def test_operation_rejects_non_positive_duration():
    with pytest.raises(InvalidArgumentError):
        Operation(name="Paint", duration_hours=0)


def test_get_schedule_groups_by_org_and_sorts_by_start(paint_service):
    paint_service.register_stations("globex", [Station(name="Lathe", operation="Turn", capacity=1)])
    paint_service.register_work_order_types(
        "globex", [WorkOrderType(name="Pin", operations=[Operation("Turn", 0.5)])]
    )
    paint_service.schedule_work_orders("acme", [order("A"), order("B"), order("C")])
    paint_service.schedule_work_orders("globex", [order("G1", "Pin"), order("G2", "Pin")])

    schedule = paint_service.get_schedule()

    assert set(schedule) == {"acme", "globex"}
    acme = schedule["acme"]
    assert [(entry.work_order_id, entry.day, entry.start, entry.end) for entry in acme] == [
        ("A", date(2024, 3, 4), "07:00", "08:00"),
        ("B", date(2024, 3, 4), "07:00", "08:00"),
        ("C", date(2024, 3, 5), "07:00", "08:00"),
    ]
    assert acme[0].operation == "Paint"
    assert acme[0].station.name == "Paint"
    assert [(entry.day, entry.start) for entry in schedule["globex"]] == [
        (date(2024, 3, 4), "07:00"),
        (date(2024, 3, 5), "07:00"),
    ]


def test_reregistering_station_keeps_its_placements(paint_service):
    paint_service.schedule_work_orders("acme", [order("A"), order("B")])
    paint_service.register_stations("acme", [Station(name="Paint", operation="Paint", capacity=3)])

    (task,) = paint_service.schedule_work_orders("acme", [order("C")])

    assert task.start.date() == date(2024, 3, 4)
    assert len(paint_service.get_schedule()["acme"]) == 3


def test_concurrent_calls_for_one_org_respect_capacity(paint_service):
    errors = []

    def worker(prefix):
        try:
            for index in range(5):
                paint_service.schedule_work_orders("acme", [order(f"{prefix}-{index}")])
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(str(n),)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    tasks = paint_service.schedule.all_tasks("acme")
    assert len(tasks) == 40
    per_slot = {}
    for task in tasks:
        per_slot[task.start] = per_slot.get(task.start, 0) + 1
    assert max(per_slot.values()) == 2
    assert min(task.start.date() for task in tasks) == date(2024, 3, 4)
    assert max(task.start.date() for task in tasks) == date(2024, 3, 4) + timedelta(days=19)


def test_reads_run_alongside_writes(paint_service):
    stop = threading.Event()
    failures = []

    def reader():
        while not stop.is_set():
            try:
                paint_service.get_schedule()
            except Exception as exc:  # pragma: no cover - surfaced by the assertion below
                failures.append(exc)
                return

    thread = threading.Thread(target=reader)
    thread.start()
    try:
        for index in range(30):
            paint_service.schedule_work_orders("acme", [order(str(index))])
    finally:
        stop.set()
        thread.join()

    assert failures == []
    assert len(paint_service.get_schedule()["acme"]) == 30
