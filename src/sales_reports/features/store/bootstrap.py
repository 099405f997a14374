"""
Store bootstrap

Hands out the Tortoise connection to the SQLite store and applies schema.sql
the first time the store is used. First-run detection relies on a
SchemaVersion marker row rather than on the store file being empty, and the
whole "check, then initialize" sequence runs under a lock shared per store file and
inside a BEGIN IMMEDIATE transaction, so concurrent callers (or processes)
never apply the schema twice.
"""

import asyncio
import logging
import sqlite3
from pathlib import Path

from tortoise import connections
from tortoise.backends.base.client import BaseDBAsyncClient
from tortoise.exceptions import BaseORMException

from ...core import config
from ...core.exceptions import SchemaInitFailed, StoreUnavailable

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
MARKER_TABLE = "SchemaVersion"

STORE_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
)

StoreError = (BaseORMException, sqlite3.Error)


def split_statements(script: str) -> list[str]:
    """
    Split a ';'-delimited script into its non-blank statements, in order.

    Lines starting with '--' are dropped before splitting, so comments may
    contain ';'.
    """
    lines = [line for line in script.splitlines() if not line.lstrip().startswith("--")]
    return [stmt.strip() for stmt in "\n".join(lines).split(";") if stmt.strip()]


class StoreBootstrap:
    """
    Lazily initialized access to one SQLite store.

    Instances for the same store file share one lock, so the "check, then
    initialize" sequence runs once at a time per process no matter how many
    bootstraps point at the store. The `ready` flag lives on the instance.
    """

    # One lock per resolved store path, shared by every instance in the process
    _locks: dict[str, asyncio.Lock] = {}

    def __init__(
        self,
        db_path: str = config.DATABASE_PATH,
        schema_path: str = config.SCHEMA_PATH,
        connection_name: str = "default",
    ):
        self.db_path = db_path
        self.schema_path = Path(schema_path)
        self.connection_name = connection_name
        self.ready = False
        self._lock = self._lock_for(db_path)

    @classmethod
    def _lock_for(cls, db_path: str) -> asyncio.Lock:
        key = db_path if db_path == ":memory:" else str(Path(db_path).expanduser().resolve())
        return cls._locks.setdefault(key, asyncio.Lock())

    async def acquire(self) -> BaseDBAsyncClient:
        """
        Return a connection with foreign keys and WAL enabled, applying the
        schema first if the store has never been initialized.

        Raises:
            StoreUnavailable: the store cannot be opened, or the schema
                resource is missing on first initialization.
            SchemaInitFailed: a schema statement failed; the transaction is
                rolled back and the store stays uninitialized.
        """
        self._check_store_path()
        try:
            conn = connections.get(self.connection_name)
        except BaseORMException as exc:
            raise StoreUnavailable(f"No connection named {self.connection_name!r}") from exc

        async with self._lock:
            await self._apply_pragmas(conn)
            if not self.ready:
                await self._initialize(conn)
                self.ready = True
        return conn

    def _check_store_path(self) -> None:
        if self.db_path == ":memory:":
            return
        parent = Path(self.db_path).expanduser().resolve().parent
        if not parent.is_dir():
            raise StoreUnavailable(f"Store directory {parent} does not exist")

    async def _apply_pragmas(self, conn: BaseDBAsyncClient) -> None:
        try:
            for pragma in STORE_PRAGMAS:
                await conn.execute_query(pragma)
        except StoreError as exc:
            raise StoreUnavailable(f"Cannot open store {self.db_path}: {exc}") from exc

    async def _initialize(self, conn: BaseDBAsyncClient) -> None:
        try:
            await conn.execute_query("BEGIN IMMEDIATE")
        except StoreError as exc:
            raise StoreUnavailable(f"Cannot lock store {self.db_path}: {exc}") from exc

        try:
            version = await self._applied_version(conn)
            if version is not None:
                logger.debug("Store %s already at schema version %s", self.db_path, version)
            elif await self._has_user_tables(conn):
                logger.info("Store %s has tables but no version marker; stamping it", self.db_path)
                await self._stamp(conn)
            else:
                statements = self._load_schema()
                logger.info(
                    "Initializing store %s with %d statements from %s",
                    self.db_path, len(statements), self.schema_path,
                )
                await self._apply_schema(conn, statements)
                await self._stamp(conn)
            await conn.execute_query("COMMIT")
        except StoreError as exc:
            await self._rollback(conn)
            raise SchemaInitFailed(f"Bootstrap of store {self.db_path} failed: {exc}") from exc
        except Exception:
            await self._rollback(conn)
            raise

    async def _rollback(self, conn: BaseDBAsyncClient) -> None:
        try:
            await conn.execute_query("ROLLBACK")
        except StoreError as exc:
            logger.error("Rollback of store bootstrap failed: %s", exc)

    async def _applied_version(self, conn: BaseDBAsyncClient) -> int | None:
        _, rows = await conn.execute_query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            [MARKER_TABLE],
        )
        if not rows:
            return None
        _, rows = await conn.execute_query(f"SELECT MAX(Version) FROM {MARKER_TABLE}")
        return rows[0][0] if rows else None

    async def _has_user_tables(self, conn: BaseDBAsyncClient) -> bool:
        _, rows = await conn.execute_query(
            "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        )
        return rows[0][0] > 0

    def _load_schema(self) -> list[str]:
        if not self.schema_path.is_file():
            raise StoreUnavailable(f"Schema resource {self.schema_path} not found")
        return split_statements(self.schema_path.read_text(encoding="utf-8"))

    async def _apply_schema(self, conn: BaseDBAsyncClient, statements: list[str]) -> None:
        for position, statement in enumerate(statements, start=1):
            try:
                await conn.execute_query(statement)
            except StoreError as exc:
                raise SchemaInitFailed(
                    f"Schema statement {position} of {len(statements)} failed: {exc}"
                ) from exc

    async def _stamp(self, conn: BaseDBAsyncClient) -> None:
        await conn.execute_query(
            f"CREATE TABLE IF NOT EXISTS {MARKER_TABLE} ("
            "Version INTEGER NOT NULL, "
            "AppliedAt TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
        )
        await conn.execute_query(f"INSERT INTO {MARKER_TABLE} (Version) VALUES (?)", [SCHEMA_VERSION])


store = StoreBootstrap()


def get_store() -> StoreBootstrap:
    """FastAPI dependency returning the process-wide bootstrap."""
    return store
