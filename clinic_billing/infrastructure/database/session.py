"""Database engine, session factory and schema bootstrap"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from clinic_billing.config import settings
from clinic_billing.infrastructure.database.models import Base
from clinic_billing.infrastructure.database.repositories import CategoryRepository


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block, or nothing.

    Any exception rolls the session back and is re-raised unchanged.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db(bind: Engine | None = None) -> None:
    """Create tables and seed predefined expense categories"""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    db = Session(bind=bind)
    try:
        with atomic(db):
            CategoryRepository(db).seed_predefined()
    finally:
        db.close()
