"""Declarative base shared by every model in tasktrack.models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
