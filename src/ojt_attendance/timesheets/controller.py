from __future__ import annotations

from typing import Any, Optional, Sequence

from flask import Flask, request

from ..common.http import as_date, json_body, ok, query_date, query_int
from ..common.validators import require_positive_id
from ..container import Container
from ..core.exceptions import ValidationError
from .model import TimesheetEntry

PREFIX = "/api/ojt_timesheets"


def _entries(data: dict[str, Any]) -> Optional[Sequence[TimesheetEntry]]:
    raw = data.get("entries")
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ValidationError("entries must be a list")
    return [TimesheetEntry.from_payload(e) for e in raw]


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    @app.get(f"{PREFIX}/", endpoint="ojt_timesheets_list", strict_slashes=False)
    def list_timesheets():
        timesheets = service.list_timesheets(
            supervisor_id=query_int("supervisor_id"),
            trainee_id=query_int("trainee_id"),
            status=(request.args.get("status") or "").strip() or None,
            week_start=query_date("week_start"),
        )
        return ok(list(timesheets))

    @app.post(f"{PREFIX}/", endpoint="ojt_timesheets_create", strict_slashes=False)
    def create_timesheet():
        data = json_body()
        timesheet = service.create(
            trainee_id=data.get("trainee_id"),
            supervisor_id=data.get("supervisor_id") or None,
            week_start=as_date(data.get("week_start"), "week_start"),
            week_end=as_date(data.get("week_end"), "week_end"),
            notes=data.get("notes"),
            entries=_entries(data) or (),
        )
        return ok(timesheet, message="Timesheet created", status=201)

    @app.get(f"{PREFIX}/pending", endpoint="ojt_timesheets_pending")
    def pending():
        supervisor_id = require_positive_id(query_int("supervisor_id"), "Supervisor ID")
        return ok(list(service.pending_for_supervisor(supervisor_id)))

    @app.get(f"{PREFIX}/current-week", endpoint="ojt_timesheets_current_week")
    def current_week():
        trainee_id = require_positive_id(query_int("trainee_id"), "Trainee ID")
        return ok(service.current_week(trainee_id))

    @app.get(f"{PREFIX}/<int:timesheet_id>", endpoint="ojt_timesheets_get")
    def get_timesheet(timesheet_id: int):
        return ok(service.get(timesheet_id))

    @app.put(f"{PREFIX}/<int:timesheet_id>", endpoint="ojt_timesheets_update")
    def update_timesheet(timesheet_id: int):
        data = json_body()
        notes = data.get("notes")
        timesheet = service.update(
            timesheet_id,
            notes=str(notes) if notes is not None else None,
            entries=_entries(data),
        )
        return ok(timesheet, message="Timesheet updated")

    @app.delete(f"{PREFIX}/<int:timesheet_id>", endpoint="ojt_timesheets_delete")
    def delete_timesheet(timesheet_id: int):
        service.delete(timesheet_id)
        return ok(message="Timesheet deleted successfully")

    @app.post(f"{PREFIX}/<int:timesheet_id>/submit", endpoint="ojt_timesheets_submit")
    def submit_timesheet(timesheet_id: int):
        return ok(service.submit(timesheet_id), message="Timesheet submitted for approval")

    @app.put(f"{PREFIX}/<int:timesheet_id>/approve", endpoint="ojt_timesheets_approve")
    def approve_timesheet(timesheet_id: int):
        data = json_body()
        timesheet = service.approve(timesheet_id, reviewer_id=data.get("reviewer_id"))
        return ok(timesheet, message="Timesheet approved")

    @app.put(f"{PREFIX}/<int:timesheet_id>/reject", endpoint="ojt_timesheets_reject")
    def reject_timesheet(timesheet_id: int):
        data = json_body()
        timesheet = service.reject(
            timesheet_id,
            reviewer_id=data.get("reviewer_id"),
            reason=data.get("reason") or "",
        )
        return ok(timesheet, message="Timesheet rejected")
