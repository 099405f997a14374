"""Jinja2 page rendering shared by the report routes and the error handlers."""
from typing import Optional

from fastapi import Request, status
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from ..features.reports.queries import HIGH_VALUE_CUSTOMERS, PRODUCT_PURCHASES, SALES_BY_PRODUCT
from .config import TEMPLATES_DIR

templates = Jinja2Templates(directory=TEMPLATES_DIR)

NAVIGATION = (
    ("/tablas", "Tablas"),
    (SALES_BY_PRODUCT.path, "Ventas por producto"),
    (PRODUCT_PURCHASES.path, "Televisores"),
    (HIGH_VALUE_CUSTOMERS.path, "Clientes > 10M"),
)


def nav_items(path: str) -> list[dict]:
    items = []
    for href, label in NAVIGATION:
        active = path == href or (href == "/tablas" and path.startswith("/tabla/"))
        items.append({"href": href, "label": label, "active": active})
    return items


def render_page(
    request: Request,
    title: str,
    body: Markup,
    subtitle: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    template: str = "layout.html",
    **context,
):
    """Render `template` inside the site chrome, with the nav link for the current path marked active."""
    context.update(
        title=title, subtitle=subtitle, body=body, nav=nav_items(request.url.path)
    )
    return templates.TemplateResponse(request, template, context, status_code=status_code)
