from datetime import date, datetime

from task_scheduler import Operation, ScheduledTask, Station, WorkOrder, WorkOrderType
from task_scheduler.repository import ScheduleStore, StationRegistry, WorkOrderTypeCatalog

DAY = date(2024, 3, 4)


def make_task(station, hour, order_id="A"):
    return ScheduledTask(
        work_order=WorkOrder(id=order_id, type="T1", due_date=DAY),
        operation=station.operation,
        station=station,
        start=datetime(2024, 3, 4, hour),
        end=datetime(2024, 3, 4, hour + 1),
    )


def test_later_station_for_same_operation_replaces_earlier():
    registry = StationRegistry()
    registry.register("acme", [Station(name="Booth 1", operation="Paint", capacity=1)])
    registry.register("acme", [Station(name="Booth 2", operation="Paint", capacity=3)])

    assert registry.station_for("acme", "Paint") == Station(
        name="Booth 2", operation="Paint", capacity=3
    )


def test_stations_are_partitioned_by_org():
    registry = StationRegistry()
    registry.register("acme", [Station(name="Booth", operation="Paint", capacity=1)])

    assert registry.has_records("acme")
    assert not registry.has_records("globex")
    assert registry.station_for("globex", "Paint") is None


def test_work_order_type_operations_accumulate():
    catalog = WorkOrderTypeCatalog()
    catalog.register("acme", [WorkOrderType(name="T1", operations=[Operation("Cut", 1.0)])])
    catalog.register("acme", [WorkOrderType(name="T1", operations=[Operation("Paint", 0.5)])])

    assert [operation.name for operation in catalog.operations_for("acme", "T1")] == [
        "Cut",
        "Paint",
    ]


def test_empty_operation_list_removes_type():
    catalog = WorkOrderTypeCatalog()
    catalog.register(
        "acme",
        [
            WorkOrderType(name="T1", operations=[Operation("Cut", 1.0)]),
            WorkOrderType(name="T2", operations=[Operation("Paint", 1.0)]),
        ],
    )
    catalog.register("acme", [WorkOrderType(name="T1", operations=[])])

    assert catalog.operations_for("acme", "T1") == []
    assert catalog.has_records("acme")

    catalog.register("acme", [WorkOrderType(name="T2")])
    assert not catalog.has_records("acme")


def test_operations_for_returns_a_copy():
    catalog = WorkOrderTypeCatalog()
    catalog.register("acme", [WorkOrderType(name="T1", operations=[Operation("Cut", 1.0)])])

    catalog.operations_for("acme", "T1").clear()

    assert len(catalog.operations_for("acme", "T1")) == 1


def test_schedule_store_indexes_by_operation_and_day():
    store = ScheduleStore()
    booth = Station(name="Booth", operation="Paint", capacity=2)
    saw = Station(name="Saw", operation="Cut", capacity=1)
    store.commit("acme", booth.operation, DAY, make_task(booth, 7))
    store.commit("acme", booth.operation, DAY, make_task(booth, 9, "B"))
    store.commit("acme", saw.operation, DAY, make_task(saw, 7))

    assert [task.work_order.id for task in store.tasks_on("acme", "Paint", DAY)] == ["A", "B"]
    assert store.tasks_on("acme", "Paint", date(2024, 3, 5)) == []
    assert store.tasks_on("globex", "Paint", DAY) == []
    assert len(store.all_tasks("acme")) == 3
    assert store.organizations() == ["acme"]


def test_ensure_ledger_keeps_existing_tasks():
    store = ScheduleStore()
    booth = Station(name="Booth", operation="Paint", capacity=2)
    store.commit("acme", booth.operation, DAY, make_task(booth, 7))

    store.ensure_ledger("acme", "Paint")

    assert len(store.tasks_on("acme", "Paint", DAY)) == 1
