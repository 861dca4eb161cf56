import json
from itertools import islice
from typing import Any
import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import iterate_paginated_api

from ..errors import RemoteStoreError, StoreQueryError, StoreUpdateError
from ..log import get_logger
from ..schemas import DayWindow, FocusRow
from .store import FocusStore

log = get_logger(__name__)

NOTION_MAX_PAGE_SIZE = 100

def _plain_text(items) -> str | None:
    if not isinstance(items, list):
        return None
    text = "".join((i or {}).get("plain_text") or "" for i in items if isinstance(i, dict))
    return text or None

def page_to_row(page: dict, day_prop: str = "day", subject_prop: str = "subject", focus_prop: str = "focus") -> FocusRow:
    """Typed view of a Notion page. Missing or odd-shaped properties become None / 0."""
    props = page.get("properties") or {}

    day = None
    day_val = (props.get(day_prop) or {}).get("date")
    if isinstance(day_val, dict):
        day = day_val.get("start")

    subj = props.get(subject_prop) or {}
    subject = None
    if isinstance(subj.get("select"), dict):
        subject = subj["select"].get("name")
    elif "rich_text" in subj:
        subject = _plain_text(subj.get("rich_text"))
    elif "title" in subj:
        subject = _plain_text(subj.get("title"))

    focus = (props.get(focus_prop) or {}).get("number")

    return FocusRow(id=str(page.get("id")), day=day, subject=subject, focus=focus)

def _wrap_property(value: Any) -> Any:
    if isinstance(value, dict):
        return value                    # already a Notion property value
    return {"number": value}

def _store_error(cls: type[RemoteStoreError], e: Exception) -> RemoteStoreError:
    """Relay what Notion said: status plus the parsed error body when there is one."""
    if isinstance(e, HTTPResponseError):
        try:
            detail = json.loads(e.body)
        except (TypeError, ValueError):
            detail = e.body
        return cls(detail=detail, status=e.status)
    return cls(detail=str(e))

# SDK errors plus transport failures underneath it
NOTION_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.TransportError)


class NotionStore(FocusStore):
    """Focus database in Notion, through the official SDK."""

    def __init__(
        self,
        token: str,
        database_id: str,
        *,
        version: str = "2022-06-28",
        base_url: str = "https://api.notion.com",
        timeout: float | None = None,
        day_property: str = "day",
        subject_property: str = "subject",
        focus_property: str = "focus",
        client: Client | None = None,
    ):
        self.database_id = database_id
        self.day_property = day_property
        self.subject_property = subject_property
        self.focus_field = focus_property
        if client is None:
            opts: dict[str, Any] = {"auth": token, "notion_version": version, "base_url": base_url}
            if timeout is not None:
                opts["timeout_ms"] = int(timeout * 1000)
            client = Client(**opts)
        self.client = client

    @classmethod
    def from_settings(cls, settings, client: Client | None = None) -> "NotionStore":
        token, database_id = settings.require_notion_credentials()
        return cls(
            token,
            database_id,
            version=settings.notion_version,
            base_url=settings.notion_base_url,
            timeout=settings.notion_timeout,
            day_property=settings.day_property,
            subject_property=settings.subject_property,
            focus_property=settings.focus_property,
            client=client,
        )

    def build_filter(self, window: DayWindow, subject: str | None = None) -> dict:
        clauses = [
            {"property": self.day_property, "date": {"on_or_after": window.today}},
            {"property": self.day_property, "date": {"before": window.tomorrow}},
        ]
        if subject is not None:
            clauses.append({"property": self.subject_property, "select": {"equals": subject}})
        return {"and": clauses}

    def query_day(self, window: DayWindow, subject: str | None = None, limit: int = 100) -> list[FocusRow]:
        pages = iterate_paginated_api(
            self.client.databases.query,
            database_id=self.database_id,
            filter=self.build_filter(window, subject),
            page_size=max(1, min(limit, NOTION_MAX_PAGE_SIZE)),
        )
        try:
            return [
                page_to_row(p, self.day_property, self.subject_property, self.focus_field)
                for p in islice(pages, limit)
            ]
        except NOTION_ERRORS as e:
            log.warning("[notion] query failed: %s", e)
            raise _store_error(StoreQueryError, e)

    def update_fields(self, row_id: str, fields: dict[str, Any]) -> None:
        properties = {name: _wrap_property(v) for name, v in fields.items()}
        try:
            self.client.pages.update(page_id=row_id, properties=properties)
        except NOTION_ERRORS as e:
            log.warning("[notion] update failed for %s: %s", row_id, e)
            raise _store_error(StoreUpdateError, e)
