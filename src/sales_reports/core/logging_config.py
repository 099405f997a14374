import logging
import sys

from .config import LOG_LEVEL, LOG_NAMESPACES


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, namespaces: list[str] | None = None) -> logging.Logger:
    """
    Attach a stdout handler to the package logger.

    Modules log through logging.getLogger(__name__), so everything under
    "sales_reports" inherits this level. With `namespaces` set (for example
    ["sales_reports.features.store"]), only records from those namespaces
    reach the console. Calling this twice does not add a second handler.
    """
    app_logger = logging.getLogger("sales_reports")
    app_logger.setLevel(level)

    if namespaces is None:
        namespaces = LOG_NAMESPACES

    for handler in list(app_logger.handlers):
        if getattr(handler, "_sales_reports_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._sales_reports_console = True
    if namespaces:
        console_handler.addFilter(NamespaceFilter(namespaces))
    app_logger.addHandler(console_handler)

    return app_logger


# To see every query the reports run:
# logging.getLogger("sales_reports.features.reports").setLevel(logging.DEBUG)
#
# And the SQL Tortoise sends to SQLite:
# logging.getLogger("tortoise.db_client").setLevel(logging.DEBUG)
