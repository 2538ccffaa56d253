from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Identity
from .repository import IdentityRepository


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, uid: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid, created_at FROM identities WHERE uid=%s", (uid,))
            r = fetchone(cur)
            if not r:
                return None
            return Identity(uid=r["uid"], created_at=r.get("created_at"))

    def create(self, uid: str) -> Identity:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO identities(uid) VALUES(%s)", (uid,))
            cur.execute("SELECT uid, created_at FROM identities WHERE uid=%s", (uid,))
            r = fetchone(cur)
            return Identity(uid=r["uid"], created_at=r.get("created_at"))
