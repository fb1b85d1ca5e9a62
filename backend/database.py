"""
Engine, session factory and declarative base for GreenLedger.

PostgreSQL in deployment; `DATABASE_URL=sqlite://` gives a single shared
in-memory connection for tests. Every query issued through a Session hides
soft-deleted rows (see `hide_soft_deleted`).
"""

import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker, with_loader_criteria
from sqlalchemy.pool import StaticPool

load_dotenv()

POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "greenledger_db")

SQLALCHEMY_DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # One connection shared by every session, otherwise each gets its own empty in-memory db
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Session, "do_orm_execute")
def hide_soft_deleted(execute_state):
    """
    Add `deleted_at IS NULL` to ORM selects of soft-deletable entities.

    Refreshes of already loaded objects and relationship loads are left alone,
    so a row soft-deleted in this session can still be read back. Queries run
    with `execution_options(include_deleted=True)` see every row; unique
    constraints still count deleted rows, so duplicate checks need that.
    """
    if (
        not execute_state.is_select
        or execute_state.is_column_load
        or execute_state.is_relationship_load
        or execute_state.execution_options.get("include_deleted", False)
    ):
        return
    for entity in execute_state.statement.column_descriptions:
        if hasattr(entity['type'], 'deleted_at'):
            execute_state.statement = execute_state.statement.options(
                with_loader_criteria(
                    entity['type'],
                    lambda cls: cls.deleted_at.is_(None),
                    include_aliases=True
                )
            )


def get_db():
    """Request-scoped session dependency; closed when the request ends."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
