"""
SQLAlchemy ORM models for the key-value table.

Table: ``key_values``: one row per storage key, value stored as a blob.
"""

from datetime import UTC, datetime

from sqlalchemy import LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from audiojournal.services.storage.database import Base


class KeyValueRecord(Base):
    """A single stored value."""

    __tablename__ = "key_values"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<KeyValueRecord key={self.key!r} size={len(self.value or b'')}>"
