"""Decoding of uploaded station, work-order-type and work-order files.

Station and work-order-type uploads are JSON documents of the form
``{"org": ..., "dataList": [...]}``. Work orders arrive as CSV with the
columns ``id,type,dueDate`` where ``dueDate`` is written ``dd/MM/yyyy``; the
first row is a header. Any malformed record rejects the whole upload.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from .domain import Operation, Station, WorkOrder, WorkOrderType
from .errors import ParseFailureError

logger = logging.getLogger(__name__)

DUE_DATE_FORMAT = "%d/%m/%Y"
ID_INDEX = 0
TYPE_INDEX = 1
DATE_INDEX = 2


class StationPayload(BaseModel):
    name: str = Field(min_length=1)
    operation: str = Field(min_length=1)
    capacity: StrictInt


class OrgStationsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    org: Optional[str] = None
    stations: Optional[List[StationPayload]] = Field(default=None, alias="dataList")


class OperationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="operation", min_length=1)
    duration_hours: float = Field(alias="durationHours", gt=0)


class WorkOrderTypePayload(BaseModel):
    name: str = Field(min_length=1)
    operations: List[OperationPayload] = Field(default_factory=list)


class OrgWorkOrderTypesPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    org: Optional[str] = None
    work_order_types: Optional[List[WorkOrderTypePayload]] = Field(
        default=None, alias="dataList"
    )


def _require_content(content: Optional[bytes], filename: str) -> bytes:
    if not content:
        logger.error("Upload %s is empty", filename)
        raise ParseFailureError(f"Uploaded file {filename!r} is empty")
    return content


def parse_stations(
    content: Optional[bytes], filename: str = "stations.json"
) -> Tuple[str, List[Station]]:
    """Decode a station upload into its organization id and stations."""

    payload = _require_content(content, filename)
    try:
        document = OrgStationsPayload.model_validate_json(payload)
    except ValidationError as exc:
        logger.error("Rejected station file %s: %s", filename, exc)
        raise ParseFailureError(f"Failed to parse JSON file: {filename}") from exc
    stations = [
        Station(name=item.name, operation=item.operation, capacity=item.capacity)
        for item in document.stations or ()
    ]
    return document.org or "", stations


def parse_work_order_types(
    content: Optional[bytes], filename: str = "work_order_types.json"
) -> Tuple[str, List[WorkOrderType]]:
    """Decode a work-order-type upload into its organization id and types."""

    payload = _require_content(content, filename)
    try:
        document = OrgWorkOrderTypesPayload.model_validate_json(payload)
    except ValidationError as exc:
        logger.error("Rejected work order type file %s: %s", filename, exc)
        raise ParseFailureError(f"Failed to parse JSON file: {filename}") from exc
    work_order_types = [
        WorkOrderType(
            name=item.name,
            operations=[
                Operation(name=operation.name, duration_hours=operation.duration_hours)
                for operation in item.operations
            ],
        )
        for item in document.work_order_types or ()
    ]
    return document.org or "", work_order_types


def parse_work_orders(
    content: Optional[bytes], filename: str = "work_orders.csv"
) -> List[WorkOrder]:
    """Decode a work-order CSV upload, skipping its header row."""

    payload = _require_content(content, filename)
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.error("Work order file %s is not UTF-8", filename)
        raise ParseFailureError(f"Failed to parse CSV file: {filename}") from exc

    work_orders: List[WorkOrder] = []
    reader = csv.reader(io.StringIO(text))
    next(reader, None)
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        line = reader.line_num
        if len(row) <= DATE_INDEX:
            logger.error("Work order file %s line %d has %d columns", filename, line, len(row))
            raise ParseFailureError(
                f"Failed to parse CSV file: {filename} (line {line}: expected id,type,dueDate)"
            )
        work_order_id = row[ID_INDEX].strip()
        type_name = row[TYPE_INDEX].strip()
        if not work_order_id or not type_name:
            raise ParseFailureError(
                f"Failed to parse CSV file: {filename} (line {line}: missing id or type)"
            )
        try:
            due_date = datetime.strptime(row[DATE_INDEX].strip(), DUE_DATE_FORMAT).date()
        except ValueError as exc:
            logger.error(
                "Work order file %s line %d has invalid due date %r",
                filename,
                line,
                row[DATE_INDEX],
            )
            raise ParseFailureError(
                f"Failed to parse CSV file: {filename} (line {line}: invalid due date)"
            ) from exc
        work_orders.append(WorkOrder(id=work_order_id, type=type_name, due_date=due_date))
    return work_orders


__all__ = [
    "parse_stations",
    "parse_work_order_types",
    "parse_work_orders",
    "DUE_DATE_FORMAT",
]
