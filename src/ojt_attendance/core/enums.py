from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles of the business application."""

    CUSTOMER = "customer"
    SALES = "sales"
    ADMIN = "admin"
    OJT_TRAINEE = "ojt"
    SUPERVISOR = "supervisor"
    OJT_SUPERVISOR = "ojt_supervisor"

    @property
    def can_review(self) -> bool:
        return self in {Role.ADMIN, Role.SUPERVISOR, Role.OJT_SUPERVISOR}


class AttendanceStatus(str, Enum):
    """Day status stored with the attendance record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class ClockState(str, Enum):
    """Daily clock cycle of one trainee."""

    NOT_CLOCKED = "NOT_CLOCKED"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    COMPLETE = "COMPLETE"


class ClockAction(str, Enum):
    CLOCK_IN = "clock-in"
    BREAK_START = "break-start"
    BREAK_END = "break-end"
    CLOCK_OUT = "clock-out"


class PermissionStatus(str, Enum):
    """Late clock-in permission decision."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class TimesheetStatus(str, Enum):
    """Weekly timesheet review flow."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class TimesheetAction(str, Enum):
    EDIT = "edit"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
