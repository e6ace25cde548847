"""Example: using the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

import importlib

from ojt_attendance.config import get_settings_module
from ojt_attendance.container import build_container
from ojt_attendance.schedule.model import OJTSchedule


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        schedule=OJTSchedule.from_settings(settings),
        photo_upload_dir=settings.PHOTO_UPLOAD_DIR,
    )
    print(container.attendance_service.get_status(1))
    print(container.attendance_service.weekly_summary(1))


if __name__ == "__main__":
    main()
