from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Create a declarative base which all models will inherit from
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Common columns for every table. Abstract, so no table of its own.
class BaseModel(Base):
    __abstract__ = True
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
