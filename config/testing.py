import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

INSTALLATION_ID = "asistencia-qr-test"

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"
QR_IMAGE_SIZE = "200x200"

TOAST_SECONDS = 3
SHELL_IDLE_SECONDS = 1800

DEBUG = False
TESTING = True
LOG_LEVEL = "INFO"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
