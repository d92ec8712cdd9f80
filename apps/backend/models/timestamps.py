"""Timezone-aware timestamp columns shared by the table models."""

from datetime import datetime, timezone
from typing import Optional
import sqlalchemy as sa
from sqlmodel import Column, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive values for tz-aware columns; treat those as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_field(default_factory=utc_now, nullable: bool = False):
    # A fresh Column per call: SQLAlchemy binds each Column to one table.
    if default_factory is None:
        return Field(default=None, sa_column=Column(sa.DateTime(timezone=True), nullable=nullable))
    return Field(
        default_factory=default_factory,
        sa_column=Column(sa.DateTime(timezone=True), nullable=nullable),
    )
