"""Shared fixtures: an in-memory focus store and an app wired to it."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from focusapp.config import Settings
from focusapp.daywindow import day_window
from focusapp.deps import get_settings, get_store_factory
from focusapp.main import app
from focusapp.schemas import DayWindow, FocusRow
from focusapp.services.store import FocusStore


class FakeStore(FocusStore):
    """Rows kept as Notion-ish dicts; `focus` may hold anything, like the real API."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self.rows = rows or []
        self.queries: list[tuple[DayWindow, str | None, int]] = []
        self.updates: list[tuple[str, dict[str, Any]]] = []

    def add(self, id: str, day: str, subject: str, focus: Any = 0) -> dict:
        row = {"id": id, "day": day, "subject": subject, "focus": focus}
        self.rows.append(row)
        return row

    def query_day(self, window, subject=None, limit=100):
        self.queries.append((window, subject, limit))
        out = []
        for r in self.rows:
            d = (r["day"] or "")[:10]
            if not (window.today <= d < window.tomorrow):
                continue
            if subject is not None and r["subject"] != subject:
                continue
            out.append(FocusRow(**r))
        return out[:limit]

    def update_fields(self, row_id, fields):
        self.updates.append((row_id, dict(fields)))
        for r in self.rows:
            if r["id"] == row_id:
                r.update(fields)
                return
        raise AssertionError(f"unknown row {row_id}")

    def get(self, row_id: str) -> dict:
        return next(r for r in self.rows if r["id"] == row_id)


@pytest.fixture()
def window() -> DayWindow:
    return day_window(tz="Asia/Seoul")


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        notion_token="secret_test",
        notion_database_id="db_test",
        store_backend="notion",
        timezone="Asia/Seoul",
        subject_match="client",
        api_key=None,
    )


@pytest.fixture()
def client(store: FakeStore, settings: Settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store_factory] = lambda: (lambda: store)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
