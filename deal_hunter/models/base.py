"""
Deal Hunter — ORM base

Declarative base for the settings database. `create_db_engine` in main.py
creates every table registered on `Base.metadata` at startup.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
