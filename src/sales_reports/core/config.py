import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]

# In a real deployment, point these at a persistent volume
DATABASE_PATH: str = os.getenv("REPORTS_DATABASE_PATH", "./database.sqlite")
SCHEMA_PATH: str = os.getenv(
    "REPORTS_SCHEMA_PATH", str(PACKAGE_DIR / "features" / "store" / "schema.sql")
)
TEMPLATES_DIR: str = str(PACKAGE_DIR / "templates")

LOG_LEVEL: str = os.getenv("REPORTS_LOG_LEVEL", "INFO").upper()
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("REPORTS_LOG_NAMESPACES", "").split(",") if ns.strip()
]

MODEL_MODULES: list[str] = ["sales_reports.features.store.models"]


def tortoise_config(db_path: str = DATABASE_PATH) -> dict:
    """Tortoise ORM config for a single SQLite store file."""
    return {
        "connections": {
            "default": {
                "engine": "tortoise.backends.sqlite",
                "credentials": {
                    "file_path": db_path,
                    "journal_mode": "WAL",
                    "foreign_keys": "ON",
                },
            }
        },
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
    }
