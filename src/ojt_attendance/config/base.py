"""Settings shared by every environment (read from env vars)."""

import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "fragranza_ojt"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PHOTO_UPLOAD_DIR = os.getenv("PHOTO_UPLOAD_DIR", "uploads/attendance")

# OJT schedule (HH:MM). One canonical schedule for lateness and the late gate.
OJT_START_TIME = os.getenv("OJT_START_TIME", "09:00")
OJT_END_TIME = os.getenv("OJT_END_TIME", "18:00")
OJT_LATE_CUTOFF = os.getenv("OJT_LATE_CUTOFF", "18:00")
OJT_EARLY_CLOCK_IN_MINUTES = int(os.getenv("OJT_EARLY_CLOCK_IN_MINUTES", "30"))
OJT_LUNCH_START = os.getenv("OJT_LUNCH_START", "12:00")
OJT_LUNCH_END = os.getenv("OJT_LUNCH_END", "13:00")
OJT_DAILY_HOURS = float(os.getenv("OJT_DAILY_HOURS", "8"))

# Clock kiosk (client side)
OJT_API_BASE_URL = os.getenv("OJT_API_BASE_URL", "http://localhost:5000/api")
REVERSE_GEOCODE_URL = os.getenv("REVERSE_GEOCODE_URL", "https://nominatim.openstreetmap.org/reverse")
FACE_MODEL_PATH = os.getenv("FACE_MODEL_PATH", "models/face_detection_yunet_2023mar.onnx")
CAMERA_DEVICE = int(os.getenv("CAMERA_DEVICE", "0"))
KIOSK_LATITUDE = os.getenv("KIOSK_LATITUDE")
KIOSK_LONGITUDE = os.getenv("KIOSK_LONGITUDE")
