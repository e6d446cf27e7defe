"""Declarative base shared by the users, sessions and preferences tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
