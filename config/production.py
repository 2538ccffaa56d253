import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

INSTALLATION_ID = os.getenv("INSTALLATION_ID", "asistencia-qr")

QR_SERVICE_URL = os.getenv("QR_SERVICE_URL", "https://api.qrserver.com/v1/create-qr-code/")
QR_IMAGE_SIZE = os.getenv("QR_IMAGE_SIZE", "200x200")

TOAST_SECONDS = int(os.getenv("TOAST_SECONDS", "3"))
SHELL_IDLE_SECONDS = int(os.getenv("SHELL_IDLE_SECONDS", "1800"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
