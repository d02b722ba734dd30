"""In-memory stand-in for an asyncpg pool/connection.

Understands exactly the statement shapes DBI and the entity query builders
emit for single-table work (insert/select/update/delete by column, count).
Anything else raises, so tests notice when SQL drifts. Foreign-key cascades,
ON DELETE SET NULL, unique constraints and transactions with snapshot
rollback are simulated.
"""

import copy
import re
from contextlib import asynccontextmanager

import asyncpg

_INSERT = re.compile(r"^INSERT INTO (\w+) \(([\w, ]+)\) VALUES \(([$\d, ]+)\) RETURNING \*$")
_UPDATE = re.compile(r"^UPDATE (\w+) SET (.+) WHERE id = \$(\d+)$")
_DELETE = re.compile(r"^DELETE FROM (\w+) WHERE (\w+) = \$1$")
_COUNT = re.compile(r"^SELECT COUNT\(\*\) AS total FROM (\w+)$")
_SELECT = re.compile(
    r"^SELECT (?:DISTINCT )?(\w+)\.\* FROM (\w+) "
    r"WHERE (?:(upper|lower)\()?(\w+)\.(\w+)\)? = (?:(?:upper|lower)\()?\$1\)?"
    r"(?: ORDER BY \w+\.id)?(?: LIMIT 1)?$"
)


def _normalize(sql):
    return " ".join(sql.split())


class FakeTransaction:
    def __init__(self, conn):
        self.conn = conn
        self._snapshot = None

    async def start(self):
        self._snapshot = copy.deepcopy((self.conn.tables, self.conn.serials))
        self.conn.transactions_started += 1

    async def commit(self):
        self._snapshot = None
        self.conn.commits += 1

    async def rollback(self):
        self.conn.tables, self.conn.serials = self._snapshot
        self._snapshot = None
        self.conn.rollbacks += 1


class FakeConnection:
    def __init__(self, tables, *, cascades=None, set_null=None, unique=None):
        self.tables = {name: [] for name in tables}
        self.serials = {name: 0 for name in tables}
        # parent table -> [(child table, fk column)]
        self.cascades = cascades or {}
        self.set_null = set_null or {}
        # table -> [tuple of columns]
        self.unique = unique or {}
        self.statements = []
        self.transactions_started = 0
        self.commits = 0
        self.rollbacks = 0

    # pool API

    @asynccontextmanager
    async def acquire(self):
        yield self

    def transaction(self):
        return FakeTransaction(self)

    # helpers

    def rows(self, table):
        return self.tables[table]

    def _check_unique(self, table, row):
        for columns in self.unique.get(table, []):
            key = tuple(row.get(c) for c in columns)
            for existing in self.tables[table]:
                if tuple(existing.get(c) for c in columns) == key:
                    raise asyncpg.exceptions.UniqueViolationError(
                        f"duplicate key value violates unique constraint on {table} {columns}"
                    )

    def _select(self, sql, args):
        match = _SELECT.match(sql)
        if match is None:
            raise NotImplementedError(f"FakeConnection cannot run: {sql}")
        _, table, fn, _, column = match.groups()
        value = args[0]

        def fold(v):
            if fn == "upper":
                return str(v).upper()
            if fn == "lower":
                return str(v).lower()
            return v

        found = [dict(r) for r in self.tables[table] if fold(r.get(column)) == fold(value)]
        if "ORDER BY" in sql:
            found.sort(key=lambda r: r.get("id"))
        if sql.endswith("LIMIT 1"):
            found = found[:1]
        return found

    def _delete_where(self, table, column, value):
        doomed = [r for r in self.tables[table] if r.get(column) == value]
        self.tables[table] = [r for r in self.tables[table] if r.get(column) != value]
        for row in doomed:
            for child, fk in self.cascades.get(table, []):
                self._delete_where(child, fk, row.get("id"))
            for child, fk in self.set_null.get(table, []):
                for child_row in self.tables[child]:
                    if child_row.get(fk) == row.get("id"):
                        child_row[fk] = None
        return len(doomed)

    # query API

    async def fetchrow(self, sql, *args):
        sql = _normalize(sql)
        self.statements.append((sql, args))

        match = _INSERT.match(sql)
        if match is not None:
            table, columns = match.group(1), [c.strip() for c in match.group(2).split(",")]
            row = dict(zip(columns, args))
            if "id" not in row and table in self.serials:
                self.serials[table] += 1
                row["id"] = self.serials[table]
            self._check_unique(table, row)
            self.tables[table].append(row)
            return dict(row)

        match = _COUNT.match(sql)
        if match is not None:
            return {"total": len(self.tables[match.group(1)])}

        found = self._select(sql, args)
        return found[0] if found else None

    async def fetch(self, sql, *args):
        sql = _normalize(sql)
        self.statements.append((sql, args))
        return self._select(sql, args)

    async def execute(self, sql, *args):
        sql = _normalize(sql)
        self.statements.append((sql, args))

        match = _UPDATE.match(sql)
        if match is not None:
            table, assignments, id_index = match.group(1), match.group(2), int(match.group(3))
            row_id = args[id_index - 1]
            changes = {}
            for assignment in assignments.split(", "):
                column, placeholder = assignment.split(" = ")
                changes[column] = args[int(placeholder.lstrip("$")) - 1]
            updated = 0
            for row in self.tables[table]:
                if row.get("id") == row_id:
                    row.update(changes)
                    updated += 1
            return f"UPDATE {updated}"

        match = _DELETE.match(sql)
        if match is not None:
            deleted = self._delete_where(match.group(1), match.group(2), args[0])
            return f"DELETE {deleted}"

        raise NotImplementedError(f"FakeConnection cannot run: {sql}")


def catalog_connection():
    """A fake wired with the catalog's tables and constraints."""
    return FakeConnection(
        [
            "performers",
            "performer_aliases",
            "performer_urls",
            "performer_tattoos",
            "performer_piercings",
            "studios",
            "studio_urls",
            "pending_activations",
            "users",
        ],
        cascades={
            "performers": [
                ("performer_aliases", "performer_id"),
                ("performer_urls", "performer_id"),
                ("performer_tattoos", "performer_id"),
                ("performer_piercings", "performer_id"),
            ],
            "studios": [("studio_urls", "studio_id")],
        },
        set_null={"studios": [("studios", "parent_studio_id")]},
        unique={
            "performer_urls": [("performer_id", "url")],
            "performer_aliases": [("performer_id", "alias")],
            "studio_urls": [("studio_id", "url")],
            "users": [("email",)],
            "pending_activations": [("invite_key",)],
        },
    )
