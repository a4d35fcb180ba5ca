"""Schema bootstrap for ``database/schema.sql``.

The schema file is written one statement per ``;``-terminated line group,
with ``--`` comments on their own lines, which is all the splitter below
understands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Mapping

from .connection import DBConfig

logger = logging.getLogger(__name__)

_SKIPPED_PREFIXES = ("CREATE DATABASE", "USE ")


def schema_statements(sql: str) -> Iterator[str]:
    """Yield executable statements; database selection lines are dropped."""
    pending: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if stripped.endswith(";"):
            statement = "\n".join(pending).strip().rstrip(";").strip()
            pending.clear()
            if not statement.upper().startswith(_SKIPPED_PREFIXES):
                yield statement
    if pending:
        yield "\n".join(pending).strip()


def ensure_database_exists(config: DBConfig) -> None:
    conn = config.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement; returns the count."""
    config = DBConfig.from_mapping(db_config)
    ensure_database_exists(config)

    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))
    conn = config.connect()
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("applied %d schema statements to %s", len(statements), config.database)
    return len(statements)


def list_tables(db_config: Mapping) -> list[str]:
    conn = DBConfig.from_mapping(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
