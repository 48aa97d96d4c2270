"""
Base database models and utilities.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
from datetime import datetime
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def to_dict(self, exclude: Optional[set[str]] = None) -> Dict[str, Any]:
        """Convert model instance to dictionary."""
        exclude = exclude or set()
        return {
            c.key: getattr(self, c.key)
            for c in sa_inspect(self).mapper.column_attrs
            if c.key not in exclude
        }

    def __repr__(self) -> str:
        attrs = [f"{k}={v!r}" for k, v in self.to_dict().items()]
        return f"{self.__class__.__name__}({', '.join(attrs)})"
