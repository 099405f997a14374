import pytest

from sales_reports.core.exceptions import QueryFailed, TableRejected
from sales_reports.features.reports import service as report_service
from sales_reports.features.reports.queries import (
    HIGH_VALUE_CUSTOMERS,
    PRODUCT_PURCHASES,
    REPORTS,
    SALES_BY_PRODUCT,
    ReportDefinition,
    ReportKey,
)
from sales_reports.features.reports.schemas import ColumnKind


@pytest.mark.asyncio
async def test_sales_by_product_aggregates_quantity_and_total(ready_store, sample_sales):
    row_set = await report_service.run_report(ready_store, SALES_BY_PRODUCT)

    assert [c.name for c in row_set.columns] == ["Producto", "Reference", "Cantidad", "Total"]
    # Highest Total first; the Lavadora has no orders and does not appear
    assert [row["Producto"] for row in row_set.rows] == ["Nevera", "Televisor"]

    tv_row = row_set.rows[1]
    assert tv_row["Reference"] == "TV-001"
    assert tv_row["Cantidad"] == 6
    assert tv_row["Total"] == 3300


@pytest.mark.asyncio
async def test_sales_by_product_two_orders_same_product(ready_store, client_factory, product_factory, order_factory):
    buyer = await client_factory("Marta")
    tv = await product_factory("Televisor", "TV-100")
    await order_factory(buyer, tv, quantity=2, total=1000)
    await order_factory(buyer, tv, quantity=3, total=1500)

    row_set = await report_service.run_report(ready_store, SALES_BY_PRODUCT)

    assert row_set.rows == [
        {"Producto": "Televisor", "Reference": "TV-100", "Cantidad": 5, "Total": 2500}
    ]


@pytest.mark.asyncio
async def test_row_keys_follow_declared_aliases(ready_store, sample_sales):
    for report in REPORTS.values():
        row_set = await report_service.run_report(ready_store, report)
        declared = [c.name for c in report.columns]
        for row in row_set.rows:
            assert list(row) == declared


@pytest.mark.asyncio
async def test_product_purchases_lists_televisor_orders_in_order(ready_store, sample_sales):
    row_set = await report_service.run_report(ready_store, PRODUCT_PURCHASES)

    assert [(r["Cliente"], r["Cantidad"], r["Total"]) for r in row_set.rows] == [
        ("Ana", 2, 1000),
        ("Ana", 3, 1500),
        ("Luis", 1, 800),
    ]
    assert {r["Producto"] for r in row_set.rows} == {"Televisor"}


@pytest.mark.asyncio
async def test_high_value_customers_threshold_is_strict(ready_store, client_factory, product_factory, order_factory):
    at_threshold = await client_factory("Exacto", "Diez")
    above = await client_factory("Uno", "Más")
    car = await product_factory("Carro", "CR-001")
    await order_factory(at_threshold, car, quantity=1, total=6_000_000)
    await order_factory(at_threshold, car, quantity=1, total=4_000_000)
    await order_factory(above, car, quantity=1, total=10_000_001)

    row_set = await report_service.run_report(ready_store, HIGH_VALUE_CUSTOMERS)

    assert row_set.rows == [
        {"ClientId": above.pk, "Name": "Uno", "LastName": "Más", "TotalComprado": 10_000_001}
    ]


@pytest.mark.asyncio
async def test_high_value_customers_ordered_by_total_desc(ready_store, client_factory, product_factory, order_factory):
    big = await client_factory("Grande")
    bigger = await client_factory("Mayor")
    car = await product_factory("Carro", "CR-002")
    await order_factory(big, car, quantity=1, total=11_000_000)
    await order_factory(bigger, car, quantity=2, total=25_000_000)

    row_set = await report_service.run_report(ready_store, HIGH_VALUE_CUSTOMERS)

    assert [r["Name"] for r in row_set.rows] == ["Mayor", "Grande"]
    assert row_set.columns[-1].kind is ColumnKind.MONEY


@pytest.mark.asyncio
async def test_reports_on_empty_store_return_no_rows(ready_store):
    for report in REPORTS.values():
        row_set = await report_service.run_report(ready_store, report)
        assert row_set.is_empty


@pytest.mark.asyncio
async def test_dump_table_keeps_insertion_order_and_extra_columns(ready_store, sample_sales):
    row_set = await report_service.dump_table(ready_store, "Client")

    assert [r["Name"] for r in row_set.rows] == ["Ana", "Luis"]
    assert list(row_set.rows[0]) == ["ClientId", "Name", "LastName", "Email", "Phone"]
    assert row_set.columns == []
    assert [c.name for c in row_set.resolved_columns()] == list(row_set.rows[0])


@pytest.mark.asyncio
async def test_dump_orders_marks_total_as_money(ready_store, sample_sales):
    row_set = await report_service.dump_table(ready_store, "Orders")
    kinds = {c.name: c.kind for c in row_set.resolved_columns()}
    assert kinds["Total"] is ColumnKind.MONEY
    assert kinds["Quantity"] is ColumnKind.TEXT
    assert len(row_set.rows) == 4


@pytest.mark.asyncio
async def test_dump_table_rejects_names_outside_whitelist(ready_store):
    with pytest.raises(TableRejected):
        await report_service.dump_table(ready_store, "Orders; DROP TABLE Client")


@pytest.mark.asyncio
async def test_dump_all_tables_in_whitelist_order(ready_store, sample_sales):
    dumps = await report_service.dump_all_tables(ready_store)
    assert [table for table, _ in dumps] == ["Client", "Product", "Orders"]
    assert [len(rows.rows) for _, rows in dumps] == [2, 3, 4]


@pytest.mark.asyncio
async def test_query_failure_raises_query_failed(ready_store):
    broken = ReportDefinition(
        key=ReportKey.SALES_BY_PRODUCT,
        title="Broken",
        sql="SELECT Nothing FROM NoSuchTable",
        columns=(),
    )
    with pytest.raises(QueryFailed):
        await report_service.run_report(ready_store, broken)


def test_get_report_by_key():
    assert report_service.get_report("televisores") is PRODUCT_PURCHASES
    assert report_service.get_report(ReportKey.HIGH_VALUE_CUSTOMERS) is HIGH_VALUE_CUSTOMERS
    with pytest.raises(KeyError):
        report_service.get_report("ventas")
