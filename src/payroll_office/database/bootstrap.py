from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_QUOTES = ("'", '"', "`")
_DATABASE_LINE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_COMMENT_LINE = re.compile(r"(?m)^\s*--.*$")


def split_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside quoted strings and identifiers."""
    quote: Optional[str] = None
    start = 0
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\" and quote != "`":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def schema_statements(schema_path: Optional[Path] = None) -> List[str]:
    """Statements of schema.sql, minus comments and database selection lines.

    The target database comes from DB_CONFIG, so the file never names one.
    """
    sql = Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8")
    sql = _DATABASE_LINE.sub("", _COMMENT_LINE.sub("", sql))
    return list(split_statements(sql))


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[Path] = None) -> int:
    """Create the database and every payroll table. Safe to re-run; returns the statement count."""
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    ensure_database_exists(conn_factory)
    statements = schema_statements(schema_path)

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("schema applied to %s (%d statements)", conn_factory.config.database, len(statements))
    return len(statements)


def list_tables(db_config: dict) -> List[str]:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
