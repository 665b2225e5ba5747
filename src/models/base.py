"""Declarative base and shared column helpers."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def new_id() -> str:
    """Return an opaque 32-character identifier."""

    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)
