"""SQLAlchemy declarative base and common utilities."""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    def apply_changes(self, changes: Dict[str, Any]) -> None:
        """Merge a partial update into the row; ``None`` is skipped for NOT NULL columns."""
        columns = self.__table__.columns
        for field, value in changes.items():
            if value is None and field in columns and not columns[field].nullable:
                continue
            setattr(self, field, value)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
