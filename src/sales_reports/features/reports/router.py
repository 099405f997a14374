"""Report pages and their JSON mirror

HTML routes render each Row Set inside the shared layout; the JSON routes
under /api/v1 return the same Row Sets as pydantic models. Whitelist
rejection is answered here with a 400; every other failure propagates to
the handlers in core.exceptions."""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from markupsafe import Markup

from ...core.templating import render_page
from ..store.bootstrap import StoreBootstrap, get_store
from . import service as report_service
from .formatter import render_table
from .queries import HIGH_VALUE_CUSTOMERS, PRODUCT_PURCHASES, SALES_BY_PRODUCT, ReportDefinition
from .schemas import ReportResponse, RowSet
from .whitelist import TableCheck, validate_table

logger = logging.getLogger(__name__)

INVALID_TABLE = Markup('<div class="pad">Tabla inválida.</div>')

Store = Annotated[StoreBootstrap, Depends(get_store)]

router = APIRouter(tags=["Reports"], default_response_class=HTMLResponse)
api_router = APIRouter(tags=["Reports API"], responses={404: {"description": "Not found"}})


async def _report_page(request: Request, store: StoreBootstrap, report: ReportDefinition):
    row_set = await report_service.run_report(store, report)
    return render_page(request, report.title, render_table(row_set), subtitle=report.subtitle)


@router.get("/tablas")
async def show_all_tables(request: Request, store: Store):
    dumps = await report_service.dump_all_tables(store)
    sections = [(table, render_table(row_set)) for table, row_set in dumps]
    return render_page(
        request,
        "Tablas base",
        Markup(""),
        subtitle="Visualiza Client, Product y Orders.",
        template="tables.html",
        sections=sections,
    )


@router.get("/tabla/{name}")
async def show_table(request: Request, name: str, store: Store):
    if validate_table(name) is TableCheck.REJECTED:
        logger.warning("Rejected table name %r", name)
        return render_page(
            request, "Tabla no permitida", INVALID_TABLE, status_code=status.HTTP_400_BAD_REQUEST
        )
    row_set = await report_service.dump_table(store, name)
    return render_page(request, f"Tabla: {name}", render_table(row_set))


@router.get(SALES_BY_PRODUCT.path)
async def show_sales_by_product(request: Request, store: Store):
    return await _report_page(request, store, SALES_BY_PRODUCT)


@router.get(PRODUCT_PURCHASES.path)
async def show_product_purchases(request: Request, store: Store):
    return await _report_page(request, store, PRODUCT_PURCHASES)


@router.get(HIGH_VALUE_CUSTOMERS.path)
async def show_high_value_customers(request: Request, store: Store):
    return await _report_page(request, store, HIGH_VALUE_CUSTOMERS)


def _to_response(title: str, row_set: RowSet, subtitle: Optional[str] = None) -> ReportResponse:
    return ReportResponse(
        title=title, subtitle=subtitle, columns=row_set.resolved_columns(), rows=row_set.rows
    )


@api_router.get("/reports/{key}", response_model=ReportResponse)
async def get_report_data(key: str, store: Store):
    try:
        report = report_service.get_report(key)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    row_set = await report_service.run_report(store, report)
    return _to_response(report.title, row_set, report.subtitle)


@api_router.get("/tables/{name}", response_model=ReportResponse)
async def get_table_data(name: str, store: Store):
    if validate_table(name) is TableCheck.REJECTED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tabla inválida.")
    row_set = await report_service.dump_table(store, name)
    return _to_response(f"Tabla: {name}", row_set)
