from typing import Any, Callable
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..config import Settings
from ..daywindow import day_window
from ..deps import get_settings, get_store_factory, require_api_key
from ..schemas import SaveResponse, parse_accumulate_request
from ..services.focus import record_focus
from ..services.store import FocusStore

router = APIRouter(prefix="/api", tags=["focus"])

@router.post("/save", dependencies=[Depends(require_api_key)])
def save_focus(
    payload: Any = Body(default=None),
    cfg: Settings = Depends(get_settings),
    store_factory: Callable[[], FocusStore] = Depends(get_store_factory),
):
    req = parse_accumulate_request(payload)
    store = store_factory()
    window = day_window(tz=cfg.timezone)
    result = record_focus(store, req, window, strategy=cfg.subject_match, limit=cfg.query_limit)
    return SaveResponse(**result.model_dump()).model_dump()

# only POST mutates; answer other verbs in the same envelope
@router.api_route("/save", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def save_wrong_method():
    return JSONResponse(status_code=405, content={"ok": False, "error": "method not allowed"})

@router.get("/today", dependencies=[Depends(require_api_key)])
def today_rows(
    cfg: Settings = Depends(get_settings),
    store_factory: Callable[[], FocusStore] = Depends(get_store_factory),
):
    store = store_factory()
    window = day_window(tz=cfg.timezone)
    rows = store.query_day(window, limit=cfg.query_limit)
    return {
        "ok": True,
        "today": window.today,
        "tomorrow": window.tomorrow,
        "rows": [{"id": r.id, "subject": r.subject, "focus": r.focus} for r in rows],
    }
