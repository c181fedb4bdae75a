"""StoreEntry model backing the namespaced key-value store."""

from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.sql import func

from database import Base


class StoreEntry(Base):
    """One JSON document stored under a fixed key."""

    __tablename__ = "store_entries"

    key = Column(String, primary_key=True)
    value_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
