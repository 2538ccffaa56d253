from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "qr_attendance")),
    )


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside of quotes and drops '--' comment lines.
    buf: list[str] = []
    in_single = False
    in_double = False

    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    for ch in "\n".join(lines):
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
