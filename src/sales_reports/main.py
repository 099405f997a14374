import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.responses import RedirectResponse
from tortoise import Tortoise

from .core.config import DATABASE_PATH, tortoise_config
from .core.exceptions import reporting_exception_handlers
from .core.logging_config import configure_logging
from .features.reports.router import api_router as reports_api_router
from .features.reports.router import router as reports_router

configure_logging()
logger = logging.getLogger("sales_reports.main")  # This logger will inherit from 'sales_reports'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Registers the Tortoise connection to the store. The schema itself is
    applied lazily by the store bootstrap on the first request.
    """
    logger.info("Starting application with store %s...", DATABASE_PATH)
    await Tortoise.init(config=tortoise_config(DATABASE_PATH))
    logger.info("Tortoise-ORM has been initialized.")

    yield

    await Tortoise.close_connections()
    logger.info("Tortoise-ORM connections have been closed.")


app = FastAPI(
    title="Sales Reports",
    description="Read-only reports over clients, products and orders.",
    version="0.1.0",
    exception_handlers=reporting_exception_handlers(),
    lifespan=lifespan,
)


@app.get("/", include_in_schema=False)
async def read_root():
    """
    Root endpoint, redirects to the table overview.
    """
    return RedirectResponse(url="/tablas", status_code=status.HTTP_302_FOUND)


app.include_router(reports_router)
app.include_router(reports_api_router, prefix="/api/v1")
