"""
db/models/ai_call.py

AI call-handling events (``hmstr_ai_data``).
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Integer
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class AICallRecord(Base):
    __tablename__ = "hmstr_ai_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action_date: Mapped[date] = mapped_column(Date, nullable=False)
    human_engaged: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
