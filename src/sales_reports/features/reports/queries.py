"""Fixed report queries and their output column contracts.

The aliases in each SELECT are part of the contract: the columns declared
next to the SQL must match them one for one, in the same order."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .schemas import ColumnKind, ReportColumn

HIGH_VALUE_THRESHOLD = 10_000_000
FEATURED_PRODUCT = "Televisor"


class ReportKey(str, Enum):
    SALES_BY_PRODUCT = "ventas-por-producto"
    PRODUCT_PURCHASES = "televisores"
    HIGH_VALUE_CUSTOMERS = "clientes-10m"


@dataclass(frozen=True)
class ReportDefinition:
    key: ReportKey
    title: str
    sql: str
    columns: tuple[ReportColumn, ...]
    params: tuple = ()
    subtitle: Optional[str] = None
    path: str = ""


def _text(name: str) -> ReportColumn:
    return ReportColumn(name=name, kind=ColumnKind.TEXT)


def _money(name: str) -> ReportColumn:
    return ReportColumn(name=name, kind=ColumnKind.MONEY)


SALES_BY_PRODUCT = ReportDefinition(
    key=ReportKey.SALES_BY_PRODUCT,
    title="Reporte total de ventas por producto",
    subtitle="Ordenado de mayor a menor por Total.",
    path="/reporte",
    sql="""
        SELECT p.Name AS Producto, p.Reference AS Reference,
               SUM(o.Quantity) AS Cantidad, SUM(o.Total) AS Total
        FROM Orders o
        JOIN Product p ON o.ProductId = p.ProductId
        GROUP BY p.ProductId, p.Name, p.Reference
        ORDER BY SUM(o.Total) DESC, p.ProductId
    """,
    columns=(_text("Producto"), _text("Reference"), _text("Cantidad"), _money("Total")),
)

PRODUCT_PURCHASES = ReportDefinition(
    key=ReportKey.PRODUCT_PURCHASES,
    title="Compras de televisores",
    subtitle=f"Detalle por cliente del producto {FEATURED_PRODUCT}.",
    path="/reporte-televisores",
    sql="""
        SELECT p.Name AS Producto, c.Name AS Cliente, o.Quantity AS Cantidad, o.Total AS Total
        FROM Orders o
        JOIN Client c ON o.ClientId = c.ClientId
        JOIN Product p ON o.ProductId = p.ProductId
        WHERE p.Name = ?
        ORDER BY o.OrderId
    """,
    params=(FEATURED_PRODUCT,),
    columns=(_text("Producto"), _text("Cliente"), _text("Cantidad"), _money("Total")),
)

HIGH_VALUE_CUSTOMERS = ReportDefinition(
    key=ReportKey.HIGH_VALUE_CUSTOMERS,
    title="Clientes con compras mayores a 10 millones",
    path="/reporte-clientes-10m",
    sql="""
        SELECT c.ClientId AS ClientId, c.Name AS Name, c.LastName AS LastName,
               SUM(o.Total) AS TotalComprado
        FROM Orders o
        JOIN Client c ON o.ClientId = c.ClientId
        GROUP BY c.ClientId, c.Name, c.LastName
        HAVING SUM(o.Total) > ?
        ORDER BY SUM(o.Total) DESC, c.ClientId
    """,
    params=(HIGH_VALUE_THRESHOLD,),
    columns=(_text("ClientId"), _text("Name"), _text("LastName"), _money("TotalComprado")),
)

REPORTS: dict[ReportKey, ReportDefinition] = {
    report.key: report for report in (SALES_BY_PRODUCT, PRODUCT_PURCHASES, HIGH_VALUE_CUSTOMERS)
}


def table_dump_sql(table: str) -> str:
    """SELECT * for a table name that already passed the whitelist."""
    return f'SELECT * FROM "{table}"'
