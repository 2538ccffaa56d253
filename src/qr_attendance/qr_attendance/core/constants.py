"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CLASS_TIMES = tuple(f"{hour:02d}:00" for hour in range(7, 16))

MIN_SEMESTER = 1
MAX_SEMESTER = 6
SEMESTERS = tuple(range(MIN_SEMESTER, MAX_SEMESTER + 1))

UNKNOWN_STUDENT_NAME = "Desconocido"

DEFAULT_QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"
DEFAULT_QR_IMAGE_SIZE = "200x200"

DEFAULT_TOAST_SECONDS = 3

# Per-tenant UI shells not used for this long are closed.
DEFAULT_SHELL_IDLE_SECONDS = 30 * 60
