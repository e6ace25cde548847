from __future__ import annotations

from flask import Flask

from ..attendance.controller import PREFIX
from ..common.http import as_date, json_body, ok, query_date, query_int
from ..common.validators import optional_bool, require_positive_id
from ..container import Container
from ..core.enums import PermissionStatus


def register(app: Flask, container: Container) -> None:
    permissions = container.late_permission_service

    @app.get(f"{PREFIX}/pending-late-requests", endpoint="ojt_attendance_pending_late_requests")
    def pending_late_requests():
        supervisor_id = require_positive_id(query_int("supervisor_id"), "Supervisor ID")
        return ok(list(permissions.pending_for_supervisor(supervisor_id)))

    @app.get(f"{PREFIX}/check-late-permission", endpoint="ojt_attendance_check_late_permission")
    def check_late_permission():
        trainee_id = require_positive_id(query_int("trainee_id"), "Trainee ID")
        req = permissions.check(trainee_id=trainee_id, permission_date=query_date("date"))
        return ok({"has_permission": bool(req and req.status == PermissionStatus.APPROVED), "data": req})

    @app.post(f"{PREFIX}/request-late-permission", endpoint="ojt_attendance_request_late_permission")
    def request_late_permission():
        data = json_body()
        req = permissions.request(
            trainee_id=data.get("trainee_id"),
            reason=data.get("reason") or "",
            permission_date=as_date(data.get("date"), "date"),
        )
        return ok(req, message="Late permission request sent to your supervisor")

    @app.post(f"{PREFIX}/grant-late-permission", endpoint="ojt_attendance_grant_late_permission")
    def grant_late_permission():
        data = json_body()
        approved = optional_bool(data.get("approved"), "approved", default=True)
        req = permissions.decide(
            trainee_id=data.get("trainee_id"),
            decided_by=data.get("granted_by"),
            approved=approved,
            permission_date=as_date(data.get("date"), "date"),
            denied_reason=data.get("denied_reason"),
        )
        return ok(req, message="Late permission approved" if approved else "Late permission denied")
