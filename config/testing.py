import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}
DB_MAX_CONNECTIONS = 3
DB_RETRY_ATTEMPTS = 3

SCHOOL_START = "07:30"

SERVER_BASE_URL = "http://testserver"
HEALTH_TIMEOUT_SECONDS = 5
SYNC_TIMEOUT_SECONDS = 30
OFFLINE_DB_PATH = os.getenv("OFFLINE_DB_PATH", "instance/offline_attendance_test.db")
DEVICE_ID = "DEV_TEST"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
