"""Declarative base shared by all ORM models."""

from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""


def generate_uuid() -> str:
    """Primary keys are UUID strings, matching the hosted backend."""
    return str(uuid4())
