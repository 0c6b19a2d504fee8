"""
db/models/spend.py

Channel spend feeds.

PPC spend comes from the Google Ads campaign export and is stored in
``cost_micros``; LSA and SEO spend are stored in currency units in ``spend``.
Each table's ``date`` column is mapped as ``spend_date``.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, Date, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class GoogleAdsCampaignData(Base):
    __tablename__ = "googleads_campain_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    google_ads_customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    spend_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    cost_micros: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class LSASpend(Base):
    __tablename__ = "spend_data_lsa"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False)
    spend_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    spend: Mapped[float | None] = mapped_column(Float, nullable=True)


class SEOSpend(Base):
    __tablename__ = "spend_data_seo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False)
    spend_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    spend: Mapped[float | None] = mapped_column(Float, nullable=True)
