# =============================================================================
# tests/fake_supabase.py - In-Memory Supabase Client
# =============================================================================
# A small stand-in for the supabase-py client used by the service tests.
# It understands the subset of the PostgREST query builder the services use:
#
#   client.table("gigs").select("*", count="exact").eq("status", "active")
#         .or_("expiry_date.is.null,expiry_date.gt.<iso>")
#         .order("created_at", desc=True).range(0, 19).execute()
#
# plus insert / update / upsert / delete, unique constraints (raising an
# error with Postgres code 23505) and a storage bucket API.
#
# Usage:
#   db = FakeSupabase(unique={"slate_likes": [("post_id", "user_id")]})
#   monkeypatch.setattr(SupabaseClient, "_instance", db)
# =============================================================================

import re
from copy import deepcopy
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


class FakeAPIError(Exception):
    """Mirrors the `code` attribute of a PostgREST APIError."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None):
        self.data = data
        self.count = count


# =============================================================================
# Filters
# =============================================================================

def _same(stored: Any, wanted: Any) -> bool:
    if stored is None or wanted is None:
        return stored is None and wanted is None
    if isinstance(stored, bool) or isinstance(wanted, bool):
        return stored == wanted
    return str(stored) == str(wanted)


def _compare(stored: Any, wanted: Any, op: str) -> bool:
    if stored is None:
        return False
    if isinstance(stored, (int, float)) and not isinstance(stored, bool):
        wanted = float(wanted)
    else:
        stored, wanted = str(stored), str(wanted)
    return {
        "gt": stored > wanted,
        "gte": stored >= wanted,
        "lt": stored < wanted,
        "lte": stored <= wanted,
    }[op]


def _like(stored: Any, pattern: str) -> bool:
    if stored is None:
        return False
    regex = ".*".join(re.escape(part) for part in pattern.split("%"))
    return re.fullmatch(regex, str(stored), flags=re.IGNORECASE | re.DOTALL) is not None


def _condition(column: str, op: str, value: Any):
    if op == "eq":
        return lambda row: _same(row.get(column), value)
    if op == "neq":
        return lambda row: not _same(row.get(column), value)
    if op in ("gt", "gte", "lt", "lte"):
        return lambda row: _compare(row.get(column), value, op)
    if op == "ilike":
        return lambda row: _like(row.get(column), value)
    if op == "is":
        return lambda row: row.get(column) is None if value == "null" else row.get(column) == value
    raise ValueError(f"Unsupported filter operator: {op}")


def _split_or(expression: str) -> list[str]:
    """Split an or-filter on commas that sit outside double quotes."""
    parts, current, quoted, escaped = [], [], False, False
    for char in expression:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == "," and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


# =============================================================================
# Query Builder
# =============================================================================

class FakeQuery:
    """One table(...) chain. Every builder method returns self."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.want_count = False
        self.filters: list = []
        self.orders: list[tuple[str, bool]] = []
        self.window: tuple[int, int] | None = None
        self.max_rows: int | None = None

    # -- actions --------------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.action = "select"
        self.want_count = count is not None
        return self

    def insert(self, data: dict | list[dict]) -> "FakeQuery":
        self.action = "insert"
        self.payload = data
        return self

    def update(self, data: dict) -> "FakeQuery":
        self.action = "update"
        self.payload = data
        return self

    def upsert(self, data: dict, on_conflict: str = "") -> "FakeQuery":
        self.action = "upsert"
        self.payload = data
        self.on_conflict = on_conflict
        return self

    def delete(self) -> "FakeQuery":
        self.action = "delete"
        return self

    # -- filters --------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "eq", value))
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "neq", value))
        return self

    def gt(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "gt", value))
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "gte", value))
        return self

    def lt(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "lt", value))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(_condition(column, "lte", value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(_condition(column, "ilike", pattern))
        return self

    def in_(self, column: str, values: list) -> "FakeQuery":
        wanted = {str(value) for value in values}
        self.filters.append(lambda row: str(row.get(column)) in wanted)
        return self

    def or_(self, expression: str) -> "FakeQuery":
        """
        PostgREST or=(a.op.v,b.op.v) with eq/gt/gte/lt/lte/ilike/is.

        Values may be double-quoted, with backslash escapes, to carry commas.
        """
        conditions = []
        for part in _split_or(expression):
            column, op, value = part.split(".", 2)
            if value.startswith('"') and value.endswith('"'):
                value = re.sub(r"\\(.)", r"\1", value[1:-1])
            conditions.append(_condition(column, op, value))
        self.filters.append(lambda row: any(check(row) for check in conditions))
        return self

    # -- modifiers ------------------------------------------------------------

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.max_rows = count
        return self

    # -- execution ------------------------------------------------------------

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.action))
        if (self.table, self.action) in self.db.failures:
            raise FakeAPIError(f"{self.action} on {self.table} failed", code="XX000")

        rows = self.db.tables.setdefault(self.table, [])
        return getattr(self, f"_run_{self.action}")(rows)

    def _matching(self, rows: list[dict]) -> list[dict]:
        return [row for row in rows if all(check(row) for check in self.filters)]

    def _run_select(self, rows: list[dict]) -> FakeResponse:
        matched = self._matching(rows)
        for column, desc in reversed(self.orders):
            present = [row for row in matched if row.get(column) is not None]
            missing = [row for row in matched if row.get(column) is None]
            present.sort(key=lambda row: row[column], reverse=desc)
            matched = present + missing

        total = len(matched)
        if self.window is not None:
            matched = matched[self.window[0]:self.window[1] + 1]
        if self.max_rows is not None:
            matched = matched[:self.max_rows]

        return FakeResponse(deepcopy(matched), total if self.want_count else None)

    def _run_insert(self, rows: list[dict]) -> FakeResponse:
        batch = self.payload if isinstance(self.payload, list) else [self.payload]
        created = []
        for data in batch:
            row = self.db.new_row(self.table, data)
            self.db.check_unique(self.table, row)
            rows.append(row)
            created.append(row)
        return FakeResponse(deepcopy(created))

    def _run_upsert(self, rows: list[dict]) -> FakeResponse:
        keys = [key.strip() for key in (self.on_conflict or "").split(",") if key.strip()]
        for row in rows:
            if keys and all(_same(row.get(key), self.payload.get(key)) for key in keys):
                row.update(deepcopy(self.payload))
                return FakeResponse([deepcopy(row)])

        row = self.db.new_row(self.table, self.payload)
        rows.append(row)
        return FakeResponse([deepcopy(row)])

    def _run_update(self, rows: list[dict]) -> FakeResponse:
        matched = self._matching(rows)
        for row in matched:
            row.update(deepcopy(self.payload))
        return FakeResponse(deepcopy(matched))

    def _run_delete(self, rows: list[dict]) -> FakeResponse:
        matched = self._matching(rows)
        self.db.tables[self.table] = [row for row in rows if row not in matched]
        return FakeResponse(deepcopy(matched))


# =============================================================================
# Storage
# =============================================================================

class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path: str, file: bytes, file_options: dict | None = None) -> dict:
        if self.storage.fail_uploads:
            raise FakeAPIError("The resource already exists", code="409")
        self.storage.objects[(self.name, path)] = {
            "content": file,
            "options": file_options or {},
        }
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path: str) -> str:
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects: dict[tuple[str, str], dict] = {}
        self.fail_uploads = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


# =============================================================================
# Client
# =============================================================================

class FakeSupabase:
    """
    In-memory tables keyed by name.

    Rows get an `id` and a strictly increasing `created_at` on insert, so
    "newest first" ordering is deterministic.
    """

    def __init__(self, unique: dict[str, list[tuple[str, ...]]] | None = None):
        self.tables: dict[str, list[dict]] = {}
        self.unique = unique or {}
        self.failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []
        self.storage = FakeStorage()
        self._ticks = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, action: str) -> None:
        """Make every `action` ("insert", "select", ...) on `table` raise."""
        self.failures.add((table, action))

    def now(self) -> str:
        self._ticks += 1
        return (EPOCH + timedelta(seconds=self._ticks)).isoformat()

    def new_row(self, table: str, data: dict) -> dict:
        row = deepcopy(data)
        row.setdefault("id", str(uuid4()))
        stamp = self.now()
        row.setdefault("created_at", stamp)
        if table == "collab_collaborators":
            row.setdefault("added_at", stamp)
        return row

    def check_unique(self, table: str, row: dict) -> None:
        for columns in self.unique.get(table, []):
            for existing in self.tables.get(table, []):
                if all(_same(existing.get(col), row.get(col)) for col in columns):
                    raise FakeAPIError(
                        f'duplicate key value violates unique constraint on {table} {columns}',
                        code="23505",
                    )

    def seed(self, table: str, **data: Any) -> dict:
        """Insert a row directly and return it."""
        row = self.new_row(table, data)
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table: str, **filters: Any) -> list[dict]:
        return [
            row for row in self.tables.get(table, [])
            if all(_same(row.get(key), value) for key, value in filters.items())
        ]
