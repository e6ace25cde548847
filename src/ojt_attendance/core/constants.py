"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Late penalty tiers (minutes late -> penalty hours).
MINOR_LATE_PENALTY_HOURS = 0.5
MAJOR_LATE_THRESHOLD_MINUTES = 120
MAJOR_LATE_PENALTY_HOURS = 4.0

# Presence verification.
DEBOUNCE_FRAMES = 3
SMOOTHING_ALPHA = 0.05
MIN_TARGET_SCORE = 30.0
MAX_TARGET_SCORE = 99.0
MIN_FACE_WIDTH_RATIO = 0.10
AUTO_CAPTURE_THRESHOLD = 90.0
AUTO_CAPTURE_FRAMES = 5
JPEG_QUALITY = 0.8

# Geolocation.
GEOLOCATION_TIMEOUT_SECONDS = 10
COORDINATE_PRECISION = 6

# Client banners.
SUCCESS_BANNER_SECONDS = 3

# Notifications.
ATTENDANCE_NOTIFICATION_TYPE = "attendance"
ATTENDANCE_NOTIFICATION_LINK = "/ojt/timesheet"
DEFAULT_NOTIFICATION_LIMIT = 50
