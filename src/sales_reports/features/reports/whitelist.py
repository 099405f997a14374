"""Closed-world whitelist for the dynamic table accessor.

Table names cannot be bound as query parameters, so the only names that are
ever interpolated into SQL are the members of ALLOWED_TABLES. To expose
another table, add it here."""
from enum import Enum

ALLOWED_TABLES: tuple[str, ...] = ("Client", "Product", "Orders")


class TableCheck(Enum):
    OK = "ok"
    REJECTED = "rejected"


def validate_table(name: str) -> TableCheck:
    if isinstance(name, str) and name in ALLOWED_TABLES:
        return TableCheck.OK
    return TableCheck.REJECTED
