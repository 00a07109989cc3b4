import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}
# Open MySQL connections allowed at once (shared hosting caps these per user).
DB_MAX_CONNECTIONS = int(os.getenv("DB_MAX_CONNECTIONS", "3"))
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))

# Time-in after this is Late (HH:MM).
SCHOOL_START = os.getenv("SCHOOL_START", "07:30")

# Scanner device
SERVER_BASE_URL = os.getenv("SERVER_BASE_URL", "http://localhost:5000")
HEALTH_TIMEOUT_SECONDS = float(os.getenv("HEALTH_TIMEOUT_SECONDS", "5"))
SYNC_TIMEOUT_SECONDS = float(os.getenv("SYNC_TIMEOUT_SECONDS", "30"))
OFFLINE_DB_PATH = os.getenv("OFFLINE_DB_PATH", "instance/offline_attendance.db")
DEVICE_ID = os.getenv("DEVICE_ID", "")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
