"""
Table descriptors: a table name paired with the dataclass its rows map to.

Row classes are plain dataclasses whose field names are the column names and
whose defaults are the zero values, so `factory()` always builds a blank row.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class Table(Generic[RowT]):
    name: str
    factory: Callable[[], RowT]

    def new_row(self) -> RowT:
        return self.factory()

    def columns(self) -> list[str]:
        return [f.name for f in dataclasses.fields(self.new_row())]

    def from_record(self, record: Any) -> RowT:
        """
        Build a fresh row from a driver record (or dict). Unknown columns are ignored.
        """
        row = self.new_row()
        for column in self.columns():
            if column in record.keys():
                setattr(row, column, record[column])
        return row


@dataclass(frozen=True)
class JoinTable(Table[RowT]):
    """
    A table whose rows point at `primary_table` through `join_column`.
    """

    primary_table: str = ""
    join_column: str = ""

    def inverse(self, join_column: str) -> "JoinTable[RowT]":
        return JoinTable(
            name=self.primary_table,
            factory=self.factory,
            primary_table=self.name,
            join_column=join_column,
        )


def row_values(row: Any, columns: list[str]) -> list[Any]:
    return [getattr(row, column) for column in columns]
