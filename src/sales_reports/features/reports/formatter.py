"""
HTML rendering of Row Sets.

Money cells are truncated to whole units and grouped with '.', everything
else is escaped text. Output is markupsafe.Markup, so templates embed it
without escaping it a second time.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from markupsafe import Markup, escape

from .schemas import ColumnKind, ReportColumn, RowSet

NO_DATA = Markup('<div class="pad">Sin datos.</div>')
THOUSANDS_SEPARATOR = "."


def format_money(value: Any) -> str:
    """
    12345678.99 -> "12.345.678".

    Fractions are truncated toward zero, not rounded. None counts as 0.
    """
    if value is None:
        return "0"
    try:
        units = int(Decimal(str(value)))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc
    return f"{units:,}".replace(",", THOUSANDS_SEPARATOR)


def escape_cell(value: Any) -> Markup:
    """Escape a text cell. Values that are already Markup pass through unchanged."""
    if value is None:
        return Markup("")
    return escape(value)


def format_cell(value: Any, column: ReportColumn) -> str:
    """Plain-text rendering of one cell (used by the CLI)."""
    if column.kind is ColumnKind.MONEY:
        return format_money(value)
    return "" if value is None else str(value)


def _render_cell(value: Any, column: ReportColumn) -> Markup:
    if column.kind is ColumnKind.MONEY:
        return Markup('<td class="money">{}</td>').format(format_money(value))
    return Markup("<td>{}</td>").format(escape_cell(value))


def render_table(row_set: RowSet) -> Markup:
    if row_set.is_empty:
        return NO_DATA

    columns = row_set.resolved_columns()
    head = Markup("").join(Markup("<th>{}</th>").format(col.name) for col in columns)
    body = Markup("").join(
        Markup("<tr>{}</tr>").format(
            Markup("").join(_render_cell(row.get(col.name), col) for col in columns)
        )
        for row in row_set.rows
    )
    return Markup("<table><thead><tr>{}</tr></thead><tbody>{}</tbody></table>").format(head, body)
