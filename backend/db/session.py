from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import get_settings, normalize_database_url
from db.base_class import Base


def _connect_args(url: str, timeout_seconds: int) -> dict:
    if url.startswith("sqlite"):
        return {"timeout": timeout_seconds, "check_same_thread": False}
    if url.startswith("postgresql"):
        return {
            "connect_timeout": timeout_seconds,
            "options": f"-c statement_timeout={timeout_seconds * 1000}",
        }
    return {}


def build_engine(database_url: str, timeout_seconds: int = 5) -> Engine:
    url = normalize_database_url(database_url)
    return create_engine(url, pool_pre_ping=True, connect_args=_connect_args(url, timeout_seconds))


settings = get_settings()
engine = build_engine(settings.database_url, settings.database_timeout_seconds)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(bind: Engine = engine) -> None:
    import models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=bind)


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
