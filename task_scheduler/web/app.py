"""FastAPI-based web interface for the station task scheduler."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates

from ..config import SchedulerSettings
from ..domain import ScheduledTask, Station
from ..errors import (
    InvalidArgumentError,
    NotConfiguredError,
    ParseFailureError,
    SchedulerError,
    UnschedulableError,
)
from ..ingestion import parse_stations, parse_work_order_types, parse_work_orders
from ..services import ScheduleEntry, SchedulerService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

ERROR_STATUS = {
    InvalidArgumentError: 400,
    ParseFailureError: 400,
    NotConfiguredError: 409,
    UnschedulableError: 422,
}


def create_app(
    settings: Optional[SchedulerSettings] = None,
    service: Optional[SchedulerService] = None,
) -> FastAPI:
    service = service or SchedulerService(settings or SchedulerSettings.from_env())

    app = FastAPI(title="Station Task Scheduler")
    app.state.scheduler_service = service

    @app.exception_handler(SchedulerError)
    async def scheduler_error_handler(request: Request, exc: SchedulerError):
        status_code = ERROR_STATUS.get(type(exc), 500)
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse({"detail": str(exc)}, status_code=status_code)

    @app.get("/")
    async def dashboard(request: Request):
        service: SchedulerService = request.app.state.scheduler_service
        schedule = service.get_schedule()
        return templates.TemplateResponse(
            request,
            "schedule.html",
            {
                "schedule": schedule,
                "work_day_start": service.settings.work_day_start.strftime("%H:%M"),
                "work_day_end": service.settings.work_day_end.strftime("%H:%M"),
            },
        )

    @app.get("/api/schedule")
    async def get_schedule(request: Request):
        service: SchedulerService = request.app.state.scheduler_service
        return {"scheduledTasks": serialize_schedule(service.get_schedule())}

    @app.post("/api/uploadWorkOrder/{org}")
    async def upload_work_order(org: str, request: Request, file: UploadFile = File(...)):
        service: SchedulerService = request.app.state.scheduler_service
        work_orders = parse_work_orders(await file.read(), file.filename or "file")
        tasks = service.schedule_work_orders(org, work_orders)
        return [serialize_task(task) for task in tasks]

    @app.post("/api/createStation")
    async def create_station(request: Request, file: UploadFile = File(...)):
        service: SchedulerService = request.app.state.scheduler_service
        org, stations = parse_stations(await file.read(), file.filename or "file")
        service.register_stations(org, stations)
        return Response(status_code=200)

    @app.post("/api/createWorkOrderTypes")
    async def create_work_order_types(request: Request, file: UploadFile = File(...)):
        service: SchedulerService = request.app.state.scheduler_service
        org, work_order_types = parse_work_order_types(
            await file.read(), file.filename or "file"
        )
        service.register_work_order_types(org, work_order_types)
        return Response(status_code=200)

    return app


def serialize_station(station: Station) -> Dict[str, object]:
    return asdict(station)


def serialize_task(task: ScheduledTask) -> Dict[str, object]:
    return {
        "workOrder": {
            "id": task.work_order.id,
            "type": task.work_order.type,
            "dueDate": task.work_order.due_date.isoformat(),
        },
        "operation": task.operation,
        "station": serialize_station(task.station),
        "startTime": task.start.strftime("%H:%M"),
        "endTime": task.end.strftime("%H:%M"),
    }


def serialize_schedule(
    schedule: Dict[str, List[ScheduleEntry]]
) -> Dict[str, List[Dict[str, object]]]:
    return {
        org: [
            {
                "operation": entry.operation,
                "station": serialize_station(entry.station),
                "workOrderId": entry.work_order_id,
                "date": entry.day.isoformat(),
                "startTime": entry.start,
                "endTime": entry.end,
            }
            for entry in entries
        ]
        for org, entries in schedule.items()
    }


__all__ = ["create_app", "serialize_task", "serialize_schedule"]
