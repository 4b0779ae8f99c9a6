"""Declarative base shared by every service's models."""

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Native uuid on Postgres, CHAR(32) elsewhere.
UUIDType = Uuid(as_uuid=True)


class Base(DeclarativeBase):
    pass
