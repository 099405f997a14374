"""Row Set schemas

A Row Set is what every report and table dump produces: ordered columns,
each with a declared kind, plus ordered rows keyed by column name. The same
models are returned as-is by the JSON endpoints."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Output columns rendered as money when their kind is not declared
MONEY_COLUMNS = frozenset({"Total", "TotalVentas", "TotalComprado"})


class ColumnKind(str, Enum):
    TEXT = "text"
    MONEY = "money"


class ReportColumn(BaseModel):
    name: str
    kind: ColumnKind = ColumnKind.TEXT

    @classmethod
    def inferred(cls, name: str) -> "ReportColumn":
        """Column whose kind is guessed from its name (used for SELECT * dumps)."""
        kind = ColumnKind.MONEY if name in MONEY_COLUMNS else ColumnKind.TEXT
        return cls(name=name, kind=kind)


class RowSet(BaseModel):
    columns: List[ReportColumn] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def resolved_columns(self) -> List[ReportColumn]:
        """
        Declared columns, or the first row's keys when none were declared.

        All rows are expected to share the first row's keys.
        """
        if self.columns or not self.rows:
            return list(self.columns)
        return [ReportColumn.inferred(name) for name in self.rows[0]]


class ReportResponse(BaseModel):
    title: str
    subtitle: Optional[str] = None
    columns: List[ReportColumn]
    rows: List[Dict[str, Any]]
