"""Declarative base shared by every diary model."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
