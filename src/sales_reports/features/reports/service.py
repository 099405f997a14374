"""
Reports Service Module

Runs the fixed report queries and the whitelisted table dumps against the
store and returns Row Sets. Nothing here writes to the store.
"""

import logging
from typing import List, Sequence

from tortoise.backends.base.client import BaseDBAsyncClient

from ...core.exceptions import QueryFailed, TableRejected
from ..store.bootstrap import StoreBootstrap, StoreError
from .queries import REPORTS, ReportDefinition, ReportKey, table_dump_sql
from .schemas import RowSet
from .whitelist import ALLOWED_TABLES, TableCheck, validate_table

logger = logging.getLogger(__name__)


async def _fetch(conn: BaseDBAsyncClient, sql: str, params: Sequence = ()) -> list[dict]:
    logger.debug("Running query: %s params=%s", " ".join(sql.split()), list(params))
    try:
        return await conn.execute_query_dict(sql, list(params))
    except StoreError as exc:
        raise QueryFailed(f"Query failed: {exc}") from exc


async def dump_table(store: StoreBootstrap, table: str) -> RowSet:
    """
    Every row of one whitelisted table, in the store's own order.

    Raises:
        TableRejected: `table` is not in the whitelist; no SQL is built.
        QueryFailed: the store rejected the query.
    """
    if validate_table(table) is not TableCheck.OK:
        raise TableRejected(table)
    conn = await store.acquire()
    rows = await _fetch(conn, table_dump_sql(table))
    return RowSet(rows=rows)


async def dump_all_tables(store: StoreBootstrap) -> List[tuple[str, RowSet]]:
    """(table, rows) for every whitelisted table, in whitelist order."""
    return [(table, await dump_table(store, table)) for table in ALLOWED_TABLES]


def get_report(key: str) -> ReportDefinition:
    """Raises KeyError for an unknown report key."""
    try:
        return REPORTS[ReportKey(key)]
    except ValueError:
        raise KeyError(key) from None


async def run_report(store: StoreBootstrap, report: ReportDefinition) -> RowSet:
    conn = await store.acquire()
    rows = await _fetch(conn, report.sql, report.params)
    logger.info("Report %s returned %d rows", report.key.value, len(rows))
    return RowSet(columns=list(report.columns), rows=rows)
