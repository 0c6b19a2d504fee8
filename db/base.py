"""
db/base.py

Declarative base for the read-only table mappings.
"""

from typing import Any

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase

# text[] on Postgres, JSON everywhere else (e.g. SQLite in tests).
SourceList = JSON().with_variant(ARRAY(Text()), "postgresql")


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class.
    """

    type_annotation_map: dict[type, Any] = {}
