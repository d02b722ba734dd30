"""
Filter/query builder.

Filters are collected as typed predicates (`Condition`, `AnyOf`, `Search`)
and only turned into SQL at render time, where each value becomes the next
asyncpg placeholder ($1, $2, ...). Column and table names always come from
code, never from request data; sort keys are checked against an allow-list.

The find query returns the distinct matching ids for one page, and the count
query returns how many ids match in total. Callers fetch full rows by id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Union

from dateutil.relativedelta import relativedelta

from . import db
from .errors import StorageError, ValidationError
from .schemas import CriterionModifier, IntCriterionInput, QuerySpec, StringCriterionInput

OPERATORS = frozenset({"=", "<>", "<", "<=", ">", ">="})


@dataclass(frozen=True)
class Condition:
    column: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op}")


@dataclass(frozen=True)
class AnyOf:
    predicates: tuple["Predicate", ...]


@dataclass(frozen=True)
class Search:
    """
    Case-insensitive partial match of `term` against any of `columns`.
    """

    columns: tuple[str, ...]
    term: str


Predicate = Union[Condition, AnyOf, Search]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def render_predicate(predicate: Predicate, args: list[Any]) -> str:
    """
    Render one predicate, appending its values to `args`.
    """
    if isinstance(predicate, Condition):
        args.append(predicate.value)
        return f"{predicate.column} {predicate.op} ${len(args)}"

    if isinstance(predicate, Search):
        args.append(_like_pattern(predicate.term))
        n = len(args)
        return "(" + " OR ".join(f"{column} ILIKE ${n}" for column in predicate.columns) + ")"

    if isinstance(predicate, AnyOf):
        parts = [render_predicate(p, args) for p in predicate.predicates]
        return "(" + " OR ".join(parts) + ")"

    raise TypeError(f"Unknown predicate: {predicate!r}")


def birth_year_predicates(column: str, criterion: IntCriterionInput) -> list[Predicate]:
    if not date.min.year <= criterion.value <= date.max.year:
        raise ValidationError(f"Birth year {criterion.value} is out of range.")
    start_of_year = date(criterion.value, 1, 1)
    end_of_year = date(criterion.value, 12, 31)

    modifier = criterion.modifier
    if modifier is CriterionModifier.EQUALS:
        return [Condition(column, ">=", start_of_year), Condition(column, "<=", end_of_year)]
    if modifier is CriterionModifier.NOT_EQUALS:
        return [AnyOf((Condition(column, "<", start_of_year), Condition(column, ">", end_of_year)))]
    if modifier is CriterionModifier.GREATER_THAN:
        return [Condition(column, ">", end_of_year)]
    if modifier is CriterionModifier.LESS_THAN:
        return [Condition(column, "<", start_of_year)]
    return []


def age_bounds(age: int, today: date | None = None) -> tuple[date, date]:
    """
    Birthdate window for someone who is exactly `age` today: (lower, upper].

    `upper` is the date they turned `age`; anyone born on or before `lower`
    has already turned `age + 1`.
    """
    today = today or date.today()
    upper = today - relativedelta(years=age)
    lower = today - relativedelta(years=age + 1)
    return lower, upper


def age_predicates(column: str, criterion: IntCriterionInput, today: date | None = None) -> list[Predicate]:
    if criterion.value < 0:
        raise ValidationError("Age must not be negative.")
    try:
        lower, upper = age_bounds(criterion.value, today)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Age {criterion.value} is out of range.") from exc

    modifier = criterion.modifier
    if modifier is CriterionModifier.EQUALS:
        return [Condition(column, ">", lower), Condition(column, "<=", upper)]
    if modifier is CriterionModifier.NOT_EQUALS:
        return [AnyOf((Condition(column, "<=", lower), Condition(column, ">", upper)))]
    if modifier is CriterionModifier.GREATER_THAN:
        return [Condition(column, "<=", lower)]
    if modifier is CriterionModifier.LESS_THAN:
        return [Condition(column, ">", upper)]
    return []


def string_predicates(column: str, criterion: StringCriterionInput) -> list[Predicate]:
    modifier = criterion.modifier
    if modifier is CriterionModifier.EQUALS:
        return [Condition(column, "=", criterion.value)]
    if modifier is CriterionModifier.NOT_EQUALS:
        return [Condition(column, "<>", criterion.value)]
    raise ValidationError(f"Modifier {modifier.value} is not supported for {column}.")


class QueryBuilder:
    def __init__(self, table: str, *, sort_columns: Iterable[str], default_sort: str) -> None:
        self.table = table
        self.sort_columns = frozenset(sort_columns)
        self.default_sort = default_sort
        self.predicates: list[Predicate] = []

    def add(self, *predicates: Predicate) -> "QueryBuilder":
        self.predicates.extend(predicates)
        return self

    def search(self, columns: Iterable[str], term: str | None) -> "QueryBuilder":
        term = (term or "").strip()
        if term:
            self.add(Search(tuple(columns), term))
        return self

    def _ids_sql(self, args: list[Any]) -> str:
        sql = f"SELECT {self.table}.id FROM {self.table}"
        if self.predicates:
            sql += " WHERE " + " AND ".join(render_predicate(p, args) for p in self.predicates)
        return sql + f" GROUP BY {self.table}.id"

    def sort_sql(self, spec: QuerySpec) -> str:
        sort = spec.sort or self.default_sort
        if sort not in self.sort_columns:
            raise ValidationError(f"Cannot sort by {sort!r}.")
        direction = spec.direction.value
        return f" ORDER BY {self.table}.{sort} {direction}, {self.table}.id {direction}"

    def find_sql(self, spec: QuerySpec) -> tuple[str, list[Any]]:
        args: list[Any] = []
        sql = self._ids_sql(args) + self.sort_sql(spec)
        args.extend([spec.per_page, spec.offset()])
        sql += f" LIMIT ${len(args) - 1} OFFSET ${len(args)}"
        return sql, args

    def count_sql(self) -> tuple[str, list[Any]]:
        args: list[Any] = []
        sql = f"SELECT COUNT(*) AS total FROM ({self._ids_sql(args)}) AS matches"
        return sql, args

    async def execute_find(self, conn: db.Queryer, spec: QuerySpec) -> tuple[list[Any], int]:
        find_sql, find_args = self.find_sql(spec)
        count_sql, count_args = self.count_sql()

        try:
            rows = await db.fetch_all(conn, find_sql, *find_args)
            count_row = await db.fetch_one(conn, count_sql, *count_args)
        except db.DRIVER_ERRORS as exc:
            raise StorageError("query", self.table, exc) from exc
        return [row["id"] for row in rows], int((count_row or {}).get("total", 0))
