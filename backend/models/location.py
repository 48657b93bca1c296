"""Location model for DB persistence."""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from models import Base

DEFAULT_SYSTEM_TYPE = "CSW"
IDENTIFIER_MAX_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 100
SYSTEM_TYPE_MAX_LENGTH = 10


def utcnow() -> datetime:
    """Current time in UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime stored as UTC and always loaded timezone-aware.

    SQLite keeps no offset, so values read back naive are tagged as UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Location(Base):
    """Locations table: id, identifier (unique), description, system type, audit dates."""

    __tablename__ = "locations"
    __table_args__ = (
        Index("ix_locations_identifier", "identifier", unique=True),
        # String(n) is not enforced by SQLite
        CheckConstraint(f"length(identifier) <= {IDENTIFIER_MAX_LENGTH}", name="ck_locations_identifier_length"),
        CheckConstraint(f"length(description) <= {DESCRIPTION_MAX_LENGTH}", name="ck_locations_description_length"),
        CheckConstraint(
            f"length(system_type_name) <= {SYSTEM_TYPE_MAX_LENGTH}",
            name="ck_locations_system_type_name_length",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    system_type_name: Mapped[str] = mapped_column(
        String(SYSTEM_TYPE_MAX_LENGTH),
        nullable=False,
        default=DEFAULT_SYSTEM_TYPE,
        server_default=DEFAULT_SYSTEM_TYPE,
    )
    created_date: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.current_timestamp(),
    )
    updated_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(timezone=True), nullable=True)
