"""HTTP client for the attendance and timesheet API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

import requests

from ..attendance.model import AttendanceRecord, ClockStatus, WeeklyTotals
from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_jsonable
from ..core.exceptions import ApiError, PermissionRequiredError
from ..geo.resolver import ResolvedLocation
from ..late_permissions.model import LatePermissionRequest
from ..timesheets.model import Timesheet, TimesheetEntry

logger = logging.getLogger(__name__)

ATTENDANCE = "/ojt_attendance"
TIMESHEETS = "/ojt_timesheets"


def _error_message(response: requests.Response, body: Any) -> str:
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return response.reason or f"HTTP {response.status_code}"


class AttendanceApiClient:
    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
                json=to_jsonable(json) if json is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"Network error: {e}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.ok and isinstance(body, dict) and body.get("success"):
            return body.get("data")

        message = _error_message(response, body)
        if isinstance(body, dict) and body.get("requires_permission"):
            raise PermissionRequiredError(message, existing_status=body.get("existing_status"))
        raise ApiError(message, status_code=response.status_code)

    # Attendance

    def get_status(self, trainee_id: int) -> ClockStatus:
        data = self._request("GET", f"{ATTENDANCE}/status", params={"trainee_id": trainee_id})
        return ClockStatus.from_payload(data)

    def get_today(self, trainee_id: int) -> Optional[AttendanceRecord]:
        data = self._request("GET", f"{ATTENDANCE}/today", params={"trainee_id": trainee_id})
        return AttendanceRecord.from_payload(data) if data else None

    def get_history(
        self,
        trainee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        data = self._request(
            "GET",
            f"{ATTENDANCE}/history",
            params={
                "trainee_id": trainee_id,
                "start_date": to_jsonable(start_date),
                "end_date": to_jsonable(end_date),
            },
        )
        return [AttendanceRecord.from_payload(r) for r in data or []]

    def weekly_summary(self, trainee_id: int, *, week_start: Optional[date] = None) -> WeeklyTotals:
        data = self._request(
            "GET",
            f"{ATTENDANCE}/weekly-summary",
            params={"trainee_id": trainee_id, "week_start": to_jsonable(week_start)},
        )
        values = dict(data)
        values["week_start"] = parse_iso_date(values["week_start"])
        values["week_end"] = parse_iso_date(values["week_end"])
        return WeeklyTotals(**values)

    def clock_in(
        self,
        trainee_id: int,
        *,
        photo: str,
        late_minutes: int,
        penalty_hours: float,
        location: Optional[ResolvedLocation] = None,
        face_verified: bool = False,
    ) -> AttendanceRecord:
        payload = {
            "trainee_id": trainee_id,
            "photo": photo,
            "late_minutes": late_minutes,
            "penalty_hours": penalty_hours,
            "face_verified": face_verified,
            **self._location_payload(location),
        }
        return AttendanceRecord.from_payload(self._request("POST", f"{ATTENDANCE}/clock-in", json=payload))

    def clock_out(
        self,
        trainee_id: int,
        *,
        photo: str,
        location: Optional[ResolvedLocation] = None,
        face_verified: bool = False,
    ) -> AttendanceRecord:
        payload = {
            "trainee_id": trainee_id,
            "photo": photo,
            "face_verified": face_verified,
            **self._location_payload(location),
        }
        return AttendanceRecord.from_payload(self._request("POST", f"{ATTENDANCE}/clock-out", json=payload))

    def break_start(self, trainee_id: int) -> AttendanceRecord:
        data = self._request("POST", f"{ATTENDANCE}/break-start", json={"trainee_id": trainee_id})
        return AttendanceRecord.from_payload(data)

    def break_end(self, trainee_id: int) -> AttendanceRecord:
        data = self._request("POST", f"{ATTENDANCE}/break-end", json={"trainee_id": trainee_id})
        return AttendanceRecord.from_payload(data)

    def pending_overtime(self, supervisor_id: int) -> list[AttendanceRecord]:
        data = self._request("GET", f"{ATTENDANCE}/pending-overtime", params={"supervisor_id": supervisor_id})
        return [AttendanceRecord.from_payload(r) for r in data or []]

    def approve_overtime(self, attendance_id: int, *, approved_by: int, approved: bool = True) -> AttendanceRecord:
        data = self._request(
            "PUT",
            f"{ATTENDANCE}/approve-overtime",
            json={"attendance_id": attendance_id, "approved_by": approved_by, "approved": approved},
        )
        return AttendanceRecord.from_payload(data)

    # Late permissions

    def request_late_permission(
        self, trainee_id: int, *, reason: str, permission_date: Optional[date] = None
    ) -> LatePermissionRequest:
        data = self._request(
            "POST",
            f"{ATTENDANCE}/request-late-permission",
            json={"trainee_id": trainee_id, "reason": reason, "date": permission_date},
        )
        return LatePermissionRequest.from_payload(data)

    def grant_late_permission(
        self,
        trainee_id: int,
        *,
        granted_by: int,
        approved: bool,
        permission_date: Optional[date] = None,
        denied_reason: Optional[str] = None,
    ) -> LatePermissionRequest:
        data = self._request(
            "POST",
            f"{ATTENDANCE}/grant-late-permission",
            json={
                "trainee_id": trainee_id,
                "granted_by": granted_by,
                "approved": approved,
                "date": permission_date,
                "denied_reason": denied_reason,
            },
        )
        return LatePermissionRequest.from_payload(data)

    def check_late_permission(
        self, trainee_id: int, *, permission_date: Optional[date] = None
    ) -> Optional[LatePermissionRequest]:
        data = self._request(
            "GET",
            f"{ATTENDANCE}/check-late-permission",
            params={"trainee_id": trainee_id, "date": to_jsonable(permission_date)},
        )
        return LatePermissionRequest.from_payload(data["data"]) if data and data.get("data") else None

    def pending_late_requests(self, supervisor_id: int) -> list[LatePermissionRequest]:
        data = self._request("GET", f"{ATTENDANCE}/pending-late-requests", params={"supervisor_id": supervisor_id})
        return [LatePermissionRequest.from_payload(r) for r in data or []]

    # Timesheets

    def list_timesheets(self, **filters: Any) -> list[Timesheet]:
        data = self._request("GET", f"{TIMESHEETS}/", params={k: to_jsonable(v) for k, v in filters.items()})
        return [Timesheet.from_payload(t) for t in data or []]

    def pending_timesheets(self, supervisor_id: int) -> list[Timesheet]:
        data = self._request("GET", f"{TIMESHEETS}/pending", params={"supervisor_id": supervisor_id})
        return [Timesheet.from_payload(t) for t in data or []]

    def current_week_timesheet(self, trainee_id: int) -> Timesheet:
        data = self._request("GET", f"{TIMESHEETS}/current-week", params={"trainee_id": trainee_id})
        return Timesheet.from_payload(data)

    def update_timesheet(
        self,
        timesheet_id: int,
        *,
        notes: Optional[str] = None,
        entries: Optional[Sequence[TimesheetEntry]] = None,
    ) -> Timesheet:
        payload: dict[str, Any] = {}
        if notes is not None:
            payload["notes"] = notes
        if entries is not None:
            payload["entries"] = list(entries)
        return Timesheet.from_payload(self._request("PUT", f"{TIMESHEETS}/{int(timesheet_id)}", json=payload))

    def submit_timesheet(self, timesheet_id: int) -> Timesheet:
        return Timesheet.from_payload(self._request("POST", f"{TIMESHEETS}/{int(timesheet_id)}/submit", json={}))

    def approve_timesheet(self, timesheet_id: int, *, reviewer_id: int) -> Timesheet:
        data = self._request("PUT", f"{TIMESHEETS}/{int(timesheet_id)}/approve", json={"reviewer_id": reviewer_id})
        return Timesheet.from_payload(data)

    def reject_timesheet(self, timesheet_id: int, *, reviewer_id: int, reason: str) -> Timesheet:
        data = self._request(
            "PUT",
            f"{TIMESHEETS}/{int(timesheet_id)}/reject",
            json={"reviewer_id": reviewer_id, "reason": reason},
        )
        return Timesheet.from_payload(data)

    @staticmethod
    def _location_payload(location: Optional[ResolvedLocation]) -> dict[str, Any]:
        if location is None:
            return {}
        return {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "location": location.address,
        }
