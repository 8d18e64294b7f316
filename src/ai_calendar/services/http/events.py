"""REST routes over the calendar service at ``/api/v1/events``.

Error bodies share the ``{"error": {code, message, trace_id}}`` shape used by
the natural-language endpoints.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from email.utils import parseaddr
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from ...api.models import AttendeePayload
from ...api.serializers import serialize_event
from ...api.state import ApiState, get_api_state
from ...domain import (
    Attendee,
    AttendeeStatus,
    CalendarEvent,
    DuplicateAttendeeError,
    EventNotFoundError,
    EventStatus,
    ToolArgumentError,
)
from ...services import CalendarService
from ...utils import as_naive
from .errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/events", tags=["events"])

MAX_PAGE_SIZE = 100

_SORT_KEYS: dict[str, Callable[[CalendarEvent], datetime]] = {
    "start_time": lambda event: event.starts_at,
    "created_at": lambda event: event.created_at or event.starts_at,
}


class AttendeeRequest(BaseModel):
    email: str
    name: Optional[str] = None
    is_organizer: bool = False

    def to_domain(self) -> Attendee:
        return Attendee(name=self.name or self.email.split("@")[0], email=self.email, is_organizer=self.is_organizer)


class EventCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    start_time: datetime
    end_time: datetime
    description: str = Field(default="", max_length=1000)
    location: Optional[str] = Field(default=None, max_length=100)
    timezone: str = "UTC"
    is_all_day: bool = False
    status: EventStatus = EventStatus.CONFIRMED
    client_reference_id: Optional[str] = None
    attendees: List[AttendeeRequest] = Field(default_factory=list)


class EventUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    description: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, max_length=100)
    status: Optional[EventStatus] = None


class RescheduleRequest(BaseModel):
    new_start_time: datetime
    new_end_time: datetime


def get_calendar(state: ApiState = Depends(get_api_state)) -> CalendarService:
    return state.calendar


def _valid_email(email: str) -> bool:
    _, address = parseaddr(email)
    local, _, domain = address.partition("@")
    return address == email and bool(local) and "." in domain


def _failure(exc: ToolArgumentError) -> JSONResponse:
    if isinstance(exc, EventNotFoundError):
        return error_response(404, "EVENT_NOT_FOUND", str(exc))
    if isinstance(exc, LookupError):
        return error_response(404, "NOT_FOUND", str(exc))
    if isinstance(exc, DuplicateAttendeeError):
        return error_response(409, "ATTENDEE_EXISTS", str(exc))
    return error_response(400, "VALIDATION_ERROR", str(exc))


def _not_found(event_id: str) -> JSONResponse:
    return error_response(404, "EVENT_NOT_FOUND", f"Event with ID {event_id} not found")


def _events(events: List[CalendarEvent]) -> List[dict]:
    return [serialize_event(event) for event in events]


@router.get("")
async def list_events(
    page: int = 1,
    size: int = 50,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    attendee: Optional[str] = None,
    status: Optional[EventStatus] = None,
    location: Optional[str] = None,
    sort: str = "start_time:asc",
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    if page < 1 or size < 1 or size > MAX_PAGE_SIZE:
        return error_response(
            400, "INVALID_PAGINATION", f"Page must be >= 1 and size must be between 1 and {MAX_PAGE_SIZE}"
        )
    if start_date and end_date and as_naive(end_date) <= as_naive(start_date):
        return error_response(400, "INVALID_DATE_RANGE", "End date must be after start date")

    if start_date and end_date:
        events = calendar.list_between(start_date, end_date)
    elif attendee:
        events = calendar.list_by_attendee(attendee)
    else:
        events = calendar.list_events()
    if status is not None:
        events = [event for event in events if event.status is status]
    if location:
        needle = location.lower()
        events = [event for event in events if event.location and needle in event.location.lower()]

    field, _, direction = sort.lower().partition(":")
    key = _SORT_KEYS.get(field, _SORT_KEYS["start_time"])
    events = sorted(events, key=key, reverse=direction == "desc")

    total = len(events)
    paged = events[(page - 1) * size : page * size]
    return JSONResponse(
        {
            "data": _events(paged),
            "pagination": {
                "page": page,
                "size": size,
                "total": total,
                "total_pages": math.ceil(total / size),
                "has_next": page * size < total,
                "has_previous": page > 1,
            },
        }
    )


@router.get("/range")
async def events_in_range(
    start_date: datetime,
    end_date: datetime,
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    if as_naive(end_date) <= as_naive(start_date):
        return error_response(400, "INVALID_DATE_RANGE", "End date must be after start date")
    return JSONResponse(_events(calendar.list_between(start_date, end_date)))


@router.get("/attendee/{email}")
async def events_for_attendee(
    email: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    status: Optional[AttendeeStatus] = None,
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    if not _valid_email(email):
        return error_response(400, "INVALID_EMAIL", "Invalid email format")

    events = calendar.list_by_attendee(email)
    if start_date is not None:
        events = [event for event in events if event.starts_at >= as_naive(start_date)]
    if end_date is not None:
        events = [event for event in events if event.ends_at <= as_naive(end_date)]
    if status is not None:
        events = [
            event
            for event in events
            if any(item.email == email and item.status is status for item in event.attendees)
        ]
    return JSONResponse(_events(sorted(events, key=lambda event: event.starts_at)))


@router.get("/{event_id}")
async def get_event(event_id: str, calendar: CalendarService = Depends(get_calendar)) -> JSONResponse:
    event = calendar.get_event(event_id)
    if event is None:
        return _not_found(event_id)
    return JSONResponse(serialize_event(event))


@router.post("")
async def create_event(request: EventCreateRequest, calendar: CalendarService = Depends(get_calendar)) -> JSONResponse:
    if request.client_reference_id:
        existing = calendar.get_event_by_client_reference(request.client_reference_id)
        if existing is not None:
            logger.info("Returning existing event for client reference %s", request.client_reference_id)
            return JSONResponse(serialize_event(existing), status_code=200)

    event = CalendarEvent(
        id="",
        title=request.title,
        starts_at=request.start_time,
        ends_at=request.end_time,
        description=request.description,
        location=request.location,
        timezone=request.timezone,
        is_all_day=request.is_all_day,
        status=request.status,
        client_reference_id=request.client_reference_id,
        attendees=[attendee.to_domain() for attendee in request.attendees],
    )
    try:
        created = calendar.create_event(event)
    except ToolArgumentError as exc:
        logger.info("Invalid event data: %s", exc)
        return _failure(exc)
    return JSONResponse(serialize_event(created), status_code=201)


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    request: EventUpdateRequest,
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    fields = request.model_dump(exclude_unset=True, exclude_none=True)
    renamed = {"start_time": "starts_at", "end_time": "ends_at"}
    changes = {renamed.get(key, key): value for key, value in fields.items()}
    try:
        updated = calendar.update_event(event_id, changes)
    except ToolArgumentError as exc:
        logger.info("Invalid event update for %s: %s", event_id, exc)
        return _failure(exc)
    return JSONResponse(serialize_event(updated))


@router.delete("/{event_id}")
async def cancel_event(event_id: str, calendar: CalendarService = Depends(get_calendar)) -> Response:
    if not calendar.cancel_event(event_id):
        return _not_found(event_id)
    return Response(status_code=204)


@router.patch("/{event_id}/reschedule")
async def reschedule_event(
    event_id: str,
    request: RescheduleRequest,
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    try:
        rescheduled = calendar.reschedule_event(event_id, request.new_start_time, request.new_end_time)
    except ToolArgumentError as exc:
        logger.info("Invalid reschedule for %s: %s", event_id, exc)
        return _failure(exc)
    return JSONResponse(serialize_event(rescheduled))


@router.get("/{event_id}/attendees")
async def list_attendees(event_id: str, calendar: CalendarService = Depends(get_calendar)) -> JSONResponse:
    event = calendar.get_event(event_id)
    if event is None:
        return _not_found(event_id)
    return JSONResponse([AttendeePayload.from_domain(attendee).model_dump() for attendee in event.attendees])


@router.post("/{event_id}/attendees")
async def add_attendee(
    event_id: str,
    request: AttendeeRequest,
    calendar: CalendarService = Depends(get_calendar),
) -> JSONResponse:
    if not _valid_email(request.email):
        return error_response(400, "INVALID_EMAIL", "Invalid email format")
    try:
        updated = calendar.add_attendee(event_id, request.to_domain())
    except ToolArgumentError as exc:
        logger.info("Could not add attendee to %s: %s", event_id, exc)
        return _failure(exc)
    return JSONResponse(serialize_event(updated), status_code=201)


@router.delete("/{event_id}/attendees/{email}")
async def remove_attendee(event_id: str, email: str, calendar: CalendarService = Depends(get_calendar)) -> JSONResponse:
    if not _valid_email(email):
        return error_response(400, "INVALID_EMAIL", "Invalid email format")
    try:
        updated = calendar.remove_attendee(event_id, email)
    except ToolArgumentError as exc:
        logger.info("Could not remove attendee from %s: %s", event_id, exc)
        return _failure(exc)
    return JSONResponse(serialize_event(updated))
