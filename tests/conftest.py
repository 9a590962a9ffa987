"""Pytest configuration and shared fixtures.

The Supabase client is replaced by an in-memory fake that understands the subset of the
query builder the services use, including embedded selects such as
``profiles:user_id (full_name)`` and ``projects (id, name)``.
"""

import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from slf_backend.main import app
from slf_backend.database.supabase_client import get_supabase, get_service_supabase
from slf_backend.core.dependencies import get_current_user
from slf_backend.modules.auth.service import clear_auth_cache


def _split_columns(columns: str) -> List[str]:
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.ordering = []
        self.limit_count = None
        self.offset_count = 0
        self.single_mode = None

    # builders
    def select(self, columns: str = "*", **kwargs):
        self.columns = columns
        return self

    def insert(self, payload):
        self.operation, self.payload = "insert", payload
        return self

    def upsert(self, payload, **kwargs):
        self.operation, self.payload = "upsert", payload
        return self

    def update(self, payload):
        self.operation, self.payload = "update", payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def is_(self, column, value):
        expected = None if value in (None, "null") else value
        self.filters.append(lambda row: row.get(column) is expected)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self.ordering.append((column, desc))
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def offset(self, count):
        self.offset_count = count
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    # execution
    def _rows(self) -> List[Dict[str, Any]]:
        return self.db.tables.setdefault(self.table_name, [])

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for column in _split_columns(self.columns):
            if "(" in column:
                head, inner = column.split("(", 1)
                head = head.strip()
                inner_columns = [c.strip() for c in inner.rstrip(")").split(",") if c.strip()]
                if ":" in head:
                    alias, fk = [p.strip() for p in head.split(":", 1)]
                else:
                    alias, fk = head, f"{head[:-1]}_id"
                target = next(
                    (r for r in self.db.tables.get(alias, []) if r.get("id") == row.get(fk) and row.get(fk)),
                    None,
                )
                result[alias] = {c: target.get(c) for c in inner_columns} if target else None
            elif column == "*":
                result.update(copy.deepcopy(row))
            else:
                result[column] = copy.deepcopy(row.get(column))
        return result

    def execute(self):
        self.db.calls.append((self.table_name, self.operation))
        if (self.table_name, self.operation) in self.db.fail_on:
            raise Exception(f"simulated failure on {self.table_name}.{self.operation}")
        rows = self._rows()

        if self.operation in ("insert", "upsert"):
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            written = []
            for payload in payloads:
                record = copy.deepcopy(payload)
                existing = None
                if self.operation == "upsert" and record.get("id"):
                    existing = next((r for r in rows if r.get("id") == record["id"]), None)
                if existing is not None:
                    existing.update(record)
                    written.append(copy.deepcopy(existing))
                    continue
                record.setdefault("id", str(uuid.uuid4()))
                record.setdefault("created_at", self.db.now())
                rows.append(record)
                written.append(copy.deepcopy(record))
            return FakeResponse(written)

        matched = [r for r in rows if self._matches(r)]
        if self.operation == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse([copy.deepcopy(r) for r in matched])
        if self.operation == "delete":
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return FakeResponse([copy.deepcopy(r) for r in matched])

        for column, desc in reversed(self.ordering):
            matched = sorted(
                matched,
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0),
                reverse=desc,
            )
        matched = matched[self.offset_count:]
        if self.limit_count is not None:
            matched = matched[:self.limit_count]
        data = [self._project(r) for r in matched]
        if self.single_mode == "maybe":
            return FakeResponse(data[0]) if data else None
        if self.single_mode == "single":
            if len(data) != 1:
                raise Exception("JSON object requested, multiple (or no) rows returned")
            return FakeResponse(data[0])
        return FakeResponse(data)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        if self.storage.fail_uploads:
            raise Exception("storage unavailable")
        self.storage.objects[(self.name, path)] = (content, file_options or {})
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects: Dict[Any, Any] = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, SimpleNamespace] = {}

    def add_session(self, token: str, user_id: str, email: str):
        self.tokens[token] = SimpleNamespace(id=user_id, email=email, user_metadata={}, app_metadata={})

    def get_user(self, jwt=None):
        user = self.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=user)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Any] = []
        self.fail_on = set()
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    @staticmethod
    def now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: Dict[str, Any]) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def test_client(fake_db: FakeSupabase) -> TestClient:
    """FastAPI test client wired to the in-memory Supabase fake."""
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides and the auth cache are reset between tests."""
    app.dependency_overrides = {}
    clear_auth_cache()
    yield
    app.dependency_overrides = {}
    clear_auth_cache()


@pytest.fixture
def login_as():
    """Override the current user: login_as("admin_lead", client_id=...)"""
    def _login(role: str, user_id: Optional[str] = None, **extra) -> Dict[str, Any]:
        user = {
            "id": user_id or f"user-{role}",
            "email": f"{role}@test.com",
            "role": role,
            "client_id": None,
            "full_name": f"Test {role}",
            **extra,
        }
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login
