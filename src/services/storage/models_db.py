"""
SQLAlchemy ORM models for the database storage backend.

Tables: ``kv_documents`` — JSON documents addressed by a string key.
"""

from datetime import UTC, datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.services.storage.database import Base


class KVDocument(Base):
    """A JSON document stored under a unique key."""

    __tablename__ = "kv_documents"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, default="[]")
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<KVDocument key={self.key!r}>"
