from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """Current time, nudged forward so it is strictly after previous"""
    now = utc_now()
    if previous is not None:
        previous = as_utc(previous)
        if now <= previous:
            return previous + timedelta(microseconds=1)
    return now


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column

    SQLite has no timezone storage, so values are written as naive UTC
    there and coerced back to UTC-aware on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        value = as_utc(value)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return as_utc(value)


class BaseModel(SQLModel):
    pass
