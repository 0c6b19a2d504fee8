"""
db/models/lead.py

Lead rows (``hmstr_leads``).

``first_qual_date`` drives bucketing and range filtering. ``spc`` holds a
channel label (``ppc`` / ``lsa`` / ``seo``) pre-computed upstream; it is only
read for cross-checking the engine's own attribution.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class Lead(Base):
    __tablename__ = "hmstr_leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False)
    first_qual_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_qual_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    first_lead_source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hmstr_qualified_lead: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lead_score_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    close_score_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    spc: Mapped[str | None] = mapped_column(String(16), nullable=True)

    __table_args__ = (
        Index("ix_hmstr_leads_client_first_qual_date", "client_id", "first_qual_date"),
    )
