from __future__ import annotations

from datetime import date

import pytest

from fakes import CUSTOMER_ID, OTHER_TRAINEE_ID, PHOTO, SUPERVISOR_ID, TRAINEE_ID, at
from ojt_attendance.attendance.model import ClockEvidence
from ojt_attendance.core.enums import AttendanceStatus, PermissionStatus
from ojt_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ojt_attendance.late_permissions.service import SUPERVISOR_GRANT_REASON

TODAY = date(2025, 3, 10)


def test_request_creates_pending_for_supervisor(late_permission_service):
    req = late_permission_service.request(trainee_id=TRAINEE_ID, reason="  Flat tire  ")

    assert req.status == PermissionStatus.PENDING
    assert req.permission_date == TODAY
    assert req.reason == "Flat tire"
    assert req.supervisor_id == SUPERVISOR_ID
    assert [r.request_id for r in late_permission_service.pending_for_supervisor(SUPERVISOR_ID)] == [req.request_id]


def test_request_needs_reason(late_permission_service):
    with pytest.raises(ValidationError, match="Reason is required"):
        late_permission_service.request(trainee_id=TRAINEE_ID, reason="   ")


def test_request_unknown_trainee(late_permission_service):
    with pytest.raises(NotFoundError):
        late_permission_service.request(trainee_id=77, reason="Traffic")


@pytest.mark.parametrize(
    "approved, message",
    [(None, "already pending"), (True, "already approved"), (False, "was denied")],
)
def test_one_request_per_day(late_permission_service, approved, message):
    late_permission_service.request(trainee_id=TRAINEE_ID, reason="Traffic")
    if approved is not None:
        late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=approved)

    with pytest.raises(ValidationError, match=message):
        late_permission_service.request(trainee_id=TRAINEE_ID, reason="Again")


def test_approve_pending_request(late_permission_service, clock):
    late_permission_service.request(trainee_id=TRAINEE_ID, reason="Traffic")
    clock.set(17, 45)

    req = late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=True)

    assert req.status == PermissionStatus.APPROVED
    assert req.granted_by == SUPERVISOR_ID
    assert req.decided_at == at(17, 45)
    assert req.usable
    assert late_permission_service.has_permission(trainee_id=TRAINEE_ID)


def test_grant_without_prior_request(late_permission_service):
    req = late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=True)

    assert req.status == PermissionStatus.APPROVED
    assert req.reason == SUPERVISOR_GRANT_REASON


def test_deny_marks_trainee_absent(late_permission_service, attendance_repo):
    late_permission_service.request(trainee_id=TRAINEE_ID, reason="Overslept")

    req = late_permission_service.decide(
        trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=False, denied_reason="Not acceptable"
    )

    assert req.status == PermissionStatus.DENIED
    assert req.denied_reason == "Not acceptable"
    record = attendance_repo.get_for_trainee_and_date(TRAINEE_ID, TODAY)
    assert record.status == AttendanceStatus.ABSENT
    assert record.supervisor_id == SUPERVISOR_ID
    assert not late_permission_service.has_permission(trainee_id=TRAINEE_ID)


def test_deny_keeps_existing_attendance(late_permission_service, attendance_service, attendance_repo):
    record = attendance_service.clock_in(TRAINEE_ID, ClockEvidence(photo=PHOTO))

    late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=False)

    assert list(attendance_repo.records) == [record.attendance_id]
    assert attendance_repo.records[record.attendance_id].status == AttendanceStatus.PRESENT


def test_decided_request_cannot_be_decided_again(late_permission_service):
    late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=True)
    with pytest.raises(ValidationError, match="already been approved"):
        late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=False)


def test_used_request_cannot_be_changed(late_permission_service, attendance_service, clock):
    late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=True)
    clock.set(18, 5)
    attendance_service.clock_in(TRAINEE_ID, ClockEvidence(photo=PHOTO))

    with pytest.raises(ValidationError, match="already been used"):
        late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=False)


def test_only_reviewers_decide(late_permission_service):
    for user_id in (CUSTOMER_ID, OTHER_TRAINEE_ID):
        with pytest.raises(AuthorizationError):
            late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=user_id, approved=True)


def test_check_for_other_date(late_permission_service):
    late_permission_service.request(trainee_id=TRAINEE_ID, reason="Exam", permission_date=date(2025, 3, 12))

    assert late_permission_service.check(trainee_id=TRAINEE_ID) is None
    assert late_permission_service.check(trainee_id=TRAINEE_ID, permission_date=date(2025, 3, 12)).reason == "Exam"
