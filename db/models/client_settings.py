"""
db/models/client_settings.py

Per-client dashboard configuration (``clients_ffs``).

The three ``*_sources`` columns hold the lead source names attributed to
each channel. A client with all three lists empty falls back to the
built-in static source names.
"""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, SourceList


class ClientSettings(Base):
    __tablename__ = "clients_ffs"

    client_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cr_client_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    cr_company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ppc_sources: Mapped[list[str] | None] = mapped_column(SourceList, nullable=True)
    lsa_sources: Mapped[list[str] | None] = mapped_column(SourceList, nullable=True)
    seo_sources: Mapped[list[str] | None] = mapped_column(SourceList, nullable=True)

    def __repr__(self) -> str:
        return f"<ClientSettings client_id={self.client_id} name={self.cr_company_name!r}>"
