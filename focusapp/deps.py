from typing import Callable
from fastapi import Depends, Header
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import Settings, settings
from .errors import UnauthorizedError
from .services.notion import NotionStore
from .services.sql_store import SqlFocusStore
from .services.store import FocusStore

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

def get_settings() -> Settings:
    return settings

def get_engine(database_url: str) -> Engine:
    # one engine per process, built on first use
    global _engine, _session_factory
    if _engine is None:
        # sqlite connections get used from FastAPI's worker threads
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        _engine = create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)
        _session_factory = sessionmaker(bind=_engine, autocommit=False, autoflush=False)
    return _engine

def get_session_factory(database_url: str) -> sessionmaker:
    get_engine(database_url)
    return _session_factory

def build_store(cfg: Settings) -> FocusStore:
    if cfg.store_backend == "sql":
        return SqlFocusStore(get_session_factory(cfg.database_url))
    # raises ConfigurationError before any request leaves the process
    return NotionStore.from_settings(cfg)

def get_store_factory(cfg: Settings = Depends(get_settings)) -> Callable[[], FocusStore]:
    # handlers build the store only after the request body has been validated
    return lambda: build_store(cfg)

def require_api_key(x_api_key: str | None = Header(default=None), cfg: Settings = Depends(get_settings)):
    if cfg.api_key and x_api_key != cfg.api_key:
        raise UnauthorizedError()
