import importlib
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .deps import get_engine
from .errors import FocusError
from .log import configure_logging, get_logger
from . import models

log = get_logger("focusapp")

app = FastAPI(title="Focus API", version="0.1.0")

# CORS (dev-friendly; tighten later)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

@app.get("/health")
def health():
    return {"ok": True}

# ---------- error envelopes ----------
@app.exception_handler(FocusError)
def _focus_error(request: Request, exc: FocusError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

@app.exception_handler(StarletteHTTPException)
def _http_error(request: Request, exc: StarletteHTTPException):
    error = "method not allowed" if exc.status_code == 405 else str(exc.detail).lower()
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": error})

@app.exception_handler(RequestValidationError)
def _bad_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"ok": False, "error": "invalid body"})

@app.exception_handler(Exception)
def _unexpected(request: Request, exc: Exception):
    log.exception("[server] unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"ok": False, "error": "server error"})

def _include_routers() -> None:
    for modname in ["focus"]:
        mod = importlib.import_module(f"{__package__}.routers.{modname}")
        app.include_router(mod.router)
        log.info("[routers] mounted %s", modname)

@app.on_event("startup")
def _on_startup():
    configure_logging(settings.log_level)
    if settings.store_backend == "sql":
        # local table only; the Notion database is provisioned elsewhere
        models.Base.metadata.create_all(bind=get_engine(settings.database_url))
    log.info("[startup] store=%s tz=%s match=%s", settings.store_backend, settings.timezone, settings.subject_match)

# Include routers immediately (not in startup event)
_include_routers()
