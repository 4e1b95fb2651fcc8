"""SQLAlchemy models for the recordview database."""

from datetime import datetime, UTC
from sqlalchemy import Column, DateTime, Integer, JSON, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class StoredRecord(Base):
    """One record of a collection; fields other than ``id`` live in ``data``."""

    __tablename__ = "records"

    id = Column(Integer, primary_key=True)
    collection = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    kwargs = {}
    if database_url.startswith("sqlite"):
        # Store calls run in worker threads, one at a time
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=False, **kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
