import asyncio
import logging

import typer
from tortoise import Tortoise

from sales_reports.core.config import DATABASE_PATH, SCHEMA_PATH, tortoise_config
from sales_reports.core.exceptions import ReportingError
from sales_reports.features.reports import service as report_service
from sales_reports.features.reports.formatter import format_cell
from sales_reports.features.reports.queries import REPORTS
from sales_reports.features.reports.schemas import RowSet
from sales_reports.features.reports.whitelist import ALLOWED_TABLES, TableCheck, validate_table
from sales_reports.features.store.bootstrap import MARKER_TABLE, StoreBootstrap

logger = logging.getLogger(__name__)

app = typer.Typer(name="sales-reports-cli", help="CLI for inspecting the sales reports store.")

DatabaseOption = typer.Option(
    DATABASE_PATH, "--database", "-d", envvar="REPORTS_DATABASE_PATH", help="Path to the SQLite store."
)
SchemaOption = typer.Option(
    SCHEMA_PATH, "--schema", envvar="REPORTS_SCHEMA_PATH", help="Schema applied on first use."
)


# Shared async context manager for database connection
class DBConnection:
    def __init__(self, database: str, schema: str = SCHEMA_PATH):
        self.store = StoreBootstrap(db_path=database, schema_path=schema)

    async def __aenter__(self) -> StoreBootstrap:
        await Tortoise.init(config=tortoise_config(self.store.db_path))
        return self.store

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


def _echo_row_set(row_set: RowSet) -> None:
    if row_set.is_empty:
        typer.echo("Sin datos.")
        return
    columns = row_set.resolved_columns()
    typer.echo("\t".join(col.name for col in columns))
    for row in row_set.rows:
        typer.echo("\t".join(format_cell(row.get(col.name), col) for col in columns))


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("init-db")
def init_db_command(database: str = DatabaseOption, schema: str = SchemaOption):
    """Applies the schema to an empty store (no-op on an initialized one)."""
    asyncio.run(_init_db(database, schema))


async def _init_db(database: str, schema: str):
    async with DBConnection(database, schema) as store:
        try:
            await store.acquire()
        except ReportingError as e:
            _fail(f"Error initializing store: {e}")
        typer.secho(f"Store {database} is ready.", fg=typer.colors.GREEN)


@app.command("check-db")
def check_db_command(database: str = DatabaseOption):
    """Tests the store connection and counts the rows of every table."""
    asyncio.run(_check_db(database))


async def _check_db(database: str):
    async with DBConnection(database) as store:
        try:
            conn = await store.acquire()
            _, rows = await conn.execute_query(f"SELECT MAX(Version) FROM {MARKER_TABLE}")
            typer.echo(f"Schema version: {rows[0][0]}")
            for table in ALLOWED_TABLES:
                _, rows = await conn.execute_query(f'SELECT COUNT(*) FROM "{table}"')
                typer.echo(f"{table}: {rows[0][0]} row(s)")
        except ReportingError as e:
            _fail(f"Store check failed: {e}")


@app.command("show-table")
def show_table_command(
    name: str = typer.Argument(..., help=f"One of: {', '.join(ALLOWED_TABLES)}."),
    database: str = DatabaseOption,
):
    """Prints every row of a whitelisted table."""
    if validate_table(name) is TableCheck.REJECTED:
        _fail(f"Error: table '{name}' is not allowed. Choose one of: {', '.join(ALLOWED_TABLES)}.")
    asyncio.run(_show_table(name, database))


async def _show_table(name: str, database: str):
    async with DBConnection(database) as store:
        try:
            row_set = await report_service.dump_table(store, name)
        except ReportingError as e:
            _fail(f"Error reading table {name}: {e}")
        _echo_row_set(row_set)


@app.command("report")
def report_command(
    key: str = typer.Argument(..., help=f"One of: {', '.join(k.value for k in REPORTS)}."),
    database: str = DatabaseOption,
):
    """Prints one of the fixed reports."""
    try:
        report = report_service.get_report(key)
    except KeyError:
        _fail(f"Error: unknown report '{key}'. Choose one of: {', '.join(k.value for k in REPORTS)}.")
    asyncio.run(_report(report, database))


async def _report(report, database: str):
    async with DBConnection(database) as store:
        try:
            row_set = await report_service.run_report(store, report)
        except ReportingError as e:
            _fail(f"Error running report {report.key.value}: {e}")
        typer.secho(report.title, bold=True)
        _echo_row_set(row_set)


if __name__ == "__main__":
    app()
