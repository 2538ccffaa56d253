from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageFailure
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back on error.

    Connector errors surface as ``StorageFailure`` so callers only deal with
    domain exceptions.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("No se pudo conectar a la base de datos: %s", e)
        raise StorageFailure("No se pudo conectar a la base de datos") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Operación de base de datos fallida: %s", e)
        raise StorageFailure("Error al acceder a la base de datos") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
