"""In-memory stand-ins for the Supabase client used across the test suite."""

from __future__ import annotations

import itertools
import threading
from collections import defaultdict
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

from postgrest.exceptions import APIError

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)

# (columns) that must be unique per table
UNIQUE = {
    "profiles": [("id",)],
    "notes": [("id",)],
    "folders": [("id",)],
    "tags": [("id",)],
    "note_tags": [("note_id", "tag_id")],
}

# column -> referenced table
FOREIGN_KEYS = {
    "notes": {"folder_id": "folders"},
    "note_tags": {"note_id": "notes", "tag_id": "tags"},
}


def _norm(value: Any) -> str | None:
    return None if value is None else str(value)


def api_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


class FakeDatabase:
    """Tables shared by every fake client, with the constraints the app relies on."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        self.lock = threading.RLock()
        self._clock = itertools.count(1)
        self._faults: list[dict[str, Any]] = []

    def now(self) -> str:
        return (BASE_TIME + timedelta(seconds=next(self._clock))).isoformat()

    def rows(self, table: str) -> list[dict[str, Any]]:
        with self.lock:
            return [dict(r) for r in self.tables[table]]

    def count(self, table: str, op: str) -> int:
        return sum(1 for call in self.calls if call == (table, op))

    def seed(self, table: str, **values: Any) -> dict[str, Any]:
        row = {k: _norm(v) if k.endswith("id") else v for k, v in values.items()}
        if table != "note_tags":
            row.setdefault("id", str(uuid4()))
        stamp = self.now()
        row.setdefault("created_at", stamp)
        row.setdefault("updated_at", stamp)
        with self.lock:
            self.tables[table].append(row)
        return dict(row)

    def fail(
        self,
        table: str,
        op: str,
        *,
        code: str = "XX000",
        message: str = "simulated backend failure",
        times: int = 1,
        side_effect: Any = None,
    ) -> None:
        """Make the next ``times`` matching operations raise an APIError."""
        self._faults.append(
            {"table": table, "op": op, "code": code, "message": message, "times": times, "side_effect": side_effect}
        )

    def check_fault(self, table: str, op: str) -> None:
        for fault in self._faults:
            if fault["table"] == table and fault["op"] == op and fault["times"] > 0:
                fault["times"] -= 1
                if fault["side_effect"] is not None:
                    fault["side_effect"]()
                raise api_error(fault["code"], fault["message"])

    def check_unique(self, table: str, row: dict[str, Any]) -> None:
        for columns in UNIQUE.get(table, []):
            key = tuple(_norm(row.get(c)) for c in columns)
            for existing in self.tables[table]:
                if tuple(_norm(existing.get(c)) for c in columns) == key:
                    raise api_error("23505", f"duplicate key value violates unique constraint on {table}")

    def check_foreign_keys(self, table: str, row: dict[str, Any]) -> None:
        for column, target in FOREIGN_KEYS.get(table, {}).items():
            value = _norm(row.get(column))
            if value is None:
                continue
            if not any(r["id"] == value for r in self.tables[target]):
                raise api_error("23503", f"insert or update on {table} violates foreign key on {column}")

    def cascade_delete(self, table: str, removed: list[dict[str, Any]]) -> None:
        ids = {r.get("id") for r in removed}
        if table == "notes":
            self.tables["note_tags"] = [l for l in self.tables["note_tags"] if l["note_id"] not in ids]
        elif table == "tags":
            self.tables["note_tags"] = [l for l in self.tables["note_tags"] if l["tag_id"] not in ids]
        elif table == "folders":
            for note in self.tables["notes"]:
                if note.get("folder_id") in ids:
                    note["folder_id"] = None


class FakeQuery:
    """Chainable subset of the postgrest request builder."""

    def __init__(self, db: FakeDatabase, table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload: Any = None
        self._filters: list[Any] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, columns: str = "*") -> FakeQuery:
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, payload: Any) -> FakeQuery:
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, changes: dict[str, Any]) -> FakeQuery:
        self._op = "update"
        self._payload = changes
        return self

    def delete(self) -> FakeQuery:
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        expected = _norm(value)
        self._filters.append(lambda row: _norm(row.get(column)) == expected)
        return self

    def in_(self, column: str, values: Any) -> FakeQuery:
        allowed = {_norm(v) for v in values}
        self._filters.append(lambda row: _norm(row.get(column)) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> FakeQuery:
        self._limit = count
        return self

    def execute(self) -> SimpleNamespace:
        with self._db.lock:
            self._db.calls.append((self._table, self._op))
            self._db.check_fault(self._table, self._op)
            data = getattr(self, f"_{self._op}")()
        return SimpleNamespace(data=data)

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(f(row) for f in self._filters)

    def _select(self) -> list[dict[str, Any]]:
        rows = [dict(r) for r in self._db.tables[self._table] if self._matches(r)]
        if self._order is not None:
            column, desc = self._order
            rows.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        return [self._embed(r) for r in rows]

    def _embed(self, row: dict[str, Any]) -> dict[str, Any]:
        if "note_tags(" in self._columns:
            row["note_tags"] = [
                {"tag_id": link["tag_id"]}
                for link in self._db.tables["note_tags"]
                if link["note_id"] == row["id"]
            ]
        if "folders(" in self._columns:
            folder = next((f for f in self._db.tables["folders"] if f["id"] == row.get("folder_id")), None)
            row["folder"] = dict(folder) if folder else None
        return row

    def _insert(self) -> list[dict[str, Any]]:
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        inserted = []
        for values in payload:
            row = {k: _norm(v) if k.endswith("id") else v for k, v in values.items()}
            if self._table != "note_tags":
                row.setdefault("id", str(uuid4()))
            stamp = self._db.now()
            row.setdefault("created_at", stamp)
            row.setdefault("updated_at", stamp)
            self._db.check_unique(self._table, row)
            self._db.check_foreign_keys(self._table, row)
            inserted.append(row)
        self._db.tables[self._table].extend(inserted)
        return [dict(r) for r in inserted]

    def _update(self) -> list[dict[str, Any]]:
        changes = {k: _norm(v) if k.endswith("id") else v for k, v in self._payload.items()}
        self._db.check_foreign_keys(self._table, changes)
        updated = []
        for row in self._db.tables[self._table]:
            if self._matches(row):
                row.update(changes)
                row["updated_at"] = self._db.now()
                updated.append(dict(row))
        return updated

    def _delete(self) -> list[dict[str, Any]]:
        kept, removed = [], []
        for row in self._db.tables[self._table]:
            (removed if self._matches(row) else kept).append(row)
        self._db.tables[self._table] = kept
        self._db.cascade_delete(self._table, removed)
        return [dict(r) for r in removed]


class FakeAdminAuth:
    def __init__(self, auth: FakeAuth) -> None:
        self._auth = auth
        self.deleted: list[str] = []
        self.error: Exception | None = None

    def delete_user(self, user_id: str) -> None:
        if self.error is not None:
            raise self.error
        self.deleted.append(user_id)
        self._auth.users = {e: u for e, u in self._auth.users.items() if str(u[0].id) != user_id}


class FakeAuth:
    """Password auth with a single client-side session."""

    def __init__(self) -> None:
        self.users: dict[str, tuple[SimpleNamespace, str]] = {}
        self.session: SimpleNamespace | None = None
        self.require_confirmation = False
        self.resent: list[str] = []
        self.sign_out_calls = 0
        self.get_user_calls = 0
        self.admin = FakeAdminAuth(self)

    def register(self, email: str, password: str = "secret123") -> SimpleNamespace:
        user = SimpleNamespace(id=str(uuid4()), email=email, role="authenticated")
        self.users[email] = (user, password)
        return user

    def login(self, email: str = "ada@example.com") -> SimpleNamespace:
        """Register (if needed) and start a session without going through sign-in."""
        if email not in self.users:
            self.register(email)
        user = self.users[email][0]
        self.session = self._start(user)
        return user

    def get_user(self, jwt: str | None = None) -> SimpleNamespace | None:
        self.get_user_calls += 1
        if self.session is None:
            return None
        return SimpleNamespace(user=self.session.user)

    def get_session(self) -> SimpleNamespace | None:
        return self.session

    def sign_up(self, credentials: dict[str, str]) -> SimpleNamespace:
        email = credentials["email"]
        if email in self.users:
            raise Exception("User already registered")
        user = self.register(email, credentials["password"])
        if self.require_confirmation:
            return SimpleNamespace(user=user, session=None)
        self.session = self._start(user)
        return SimpleNamespace(user=user, session=self.session)

    def sign_in_with_password(self, credentials: dict[str, str]) -> SimpleNamespace:
        entry = self.users.get(credentials["email"])
        if entry is None or entry[1] != credentials["password"]:
            raise Exception("Invalid login credentials")
        self.session = self._start(entry[0])
        return SimpleNamespace(user=entry[0], session=self.session)

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.session = None

    def resend(self, payload: dict[str, str]) -> None:
        self.resent.append(payload["email"])

    @staticmethod
    def _start(user: SimpleNamespace) -> SimpleNamespace:
        return SimpleNamespace(
            access_token=f"header.{user.id}.signature",
            refresh_token="refresh-token",
            expires_in=3600,
            expires_at=1_700_000_000,
            user=user,
        )


class FakeSupabase:
    """Just enough of ``supabase.Client`` for the repositories and services."""

    def __init__(self, db: FakeDatabase | None = None) -> None:
        self.db = db or FakeDatabase()
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.db, name)
