from __future__ import annotations

from datetime import datetime

import pytest

from src.qr_attendance.qr_attendance.identity.model import Tenant


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 7, 0, 0)


@pytest.fixture
def tenant() -> Tenant:
    return Tenant(installation_id="asistencia-qr-test", uid="u-1")
