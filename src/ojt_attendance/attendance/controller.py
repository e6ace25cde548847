from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask

from ..common.http import json_body, ok, query_date, query_int
from ..common.validators import optional_bool, optional_float, require_positive_id
from ..container import Container
from ..core.exceptions import ValidationError
from .model import ClockEvidence

PREFIX = "/api/ojt_attendance"


def _evidence(data: Mapping[str, Any]) -> ClockEvidence:
    return ClockEvidence(
        photo=data.get("photo") or None,
        latitude=optional_float(data.get("latitude"), "latitude"),
        longitude=optional_float(data.get("longitude"), "longitude"),
        location=(data.get("location") or "").strip() or None,
        face_verified=optional_bool(data.get("face_verified"), "face_verified"),
    )


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    number = optional_float(value, field_name)
    return None if number is None else int(number)


def _status_payload(status) -> dict[str, Any]:
    return {
        "has_record": status.has_record,
        "clocked_in": status.clocked_in,
        "clocked_out": status.clocked_out,
        "on_break": status.on_break,
        "state": status.state,
        "record": status.record,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.get(f"{PREFIX}/status", endpoint="ojt_attendance_status")
    def status():
        trainee_id = require_positive_id(query_int("trainee_id"), "Trainee ID")
        return ok(_status_payload(service.get_status(trainee_id)))

    @app.get(f"{PREFIX}/today", endpoint="ojt_attendance_today")
    def today():
        trainee_id = query_int("trainee_id")
        supervisor_id = query_int("supervisor_id")
        if trainee_id:
            return ok(service.get_today_for_trainee(trainee_id))
        if supervisor_id:
            return ok(list(service.get_today_for_supervisor(supervisor_id)))
        raise ValidationError("Trainee ID or Supervisor ID required")

    @app.get(f"{PREFIX}/history", endpoint="ojt_attendance_history")
    def history():
        trainee_id = require_positive_id(query_int("trainee_id"), "Trainee ID")
        records = service.get_history(
            trainee_id,
            start_date=query_date("start_date"),
            end_date=query_date("end_date"),
        )
        return ok(list(records))

    @app.get(f"{PREFIX}/weekly-summary", endpoint="ojt_attendance_weekly_summary")
    def weekly_summary():
        trainee_id = require_positive_id(query_int("trainee_id"), "Trainee ID")
        return ok(service.weekly_summary(trainee_id, week_start=query_date("week_start")))

    @app.get(f"{PREFIX}/pending-overtime", endpoint="ojt_attendance_pending_overtime")
    def pending_overtime():
        supervisor_id = require_positive_id(query_int("supervisor_id"), "Supervisor ID")
        return ok(list(service.pending_overtime(supervisor_id)))

    @app.post(f"{PREFIX}/clock-in", endpoint="ojt_attendance_clock_in")
    def clock_in():
        data = json_body()
        record = service.clock_in(
            require_positive_id(data.get("trainee_id"), "Trainee ID"),
            _evidence(data),
            reported_late_minutes=_optional_int(data.get("late_minutes"), "late_minutes"),
            reported_penalty_hours=optional_float(data.get("penalty_hours"), "penalty_hours"),
        )
        return ok(record, message="Clocked in successfully")

    @app.post(f"{PREFIX}/clock-out", endpoint="ojt_attendance_clock_out")
    def clock_out():
        data = json_body()
        record = service.clock_out(require_positive_id(data.get("trainee_id"), "Trainee ID"), _evidence(data))
        return ok(record, message="Clocked out successfully")

    @app.post(f"{PREFIX}/break-start", endpoint="ojt_attendance_break_start")
    def break_start():
        data = json_body()
        record = service.start_break(require_positive_id(data.get("trainee_id"), "Trainee ID"))
        return ok(record, message="Break started")

    @app.post(f"{PREFIX}/break-end", endpoint="ojt_attendance_break_end")
    def break_end():
        data = json_body()
        record = service.end_break(require_positive_id(data.get("trainee_id"), "Trainee ID"))
        return ok(record, message="Break ended")

    @app.put(f"{PREFIX}/approve-overtime", endpoint="ojt_attendance_approve_overtime")
    def approve_overtime():
        data = json_body()
        approved = optional_bool(data.get("approved"), "approved", default=True)
        record = service.decide_overtime(
            attendance_id=data.get("attendance_id"),
            approved_by=data.get("approved_by"),
            approved=approved,
        )
        return ok(record, message="Overtime approved" if approved else "Overtime rejected")
