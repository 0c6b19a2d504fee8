"""
db/repositories/spend_repository.py

Reads the three channel spend feeds.

Amounts are returned in each feed's raw unit (micros for PPC); the
attribution engine performs the currency conversion.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attribution.records import SpendFeed, SpendRecord
from db.models.spend import GoogleAdsCampaignData, LSASpend, SEOSpend
from db.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)

# feed → (client column, date column, amount column, row id)
_FEED_COLUMNS: dict[SpendFeed, tuple[Any, Any, Any, Any]] = {
    SpendFeed.PPC: (
        GoogleAdsCampaignData.google_ads_customer_id,
        GoogleAdsCampaignData.spend_date,
        GoogleAdsCampaignData.cost_micros,
        GoogleAdsCampaignData.id,
    ),
    SpendFeed.LSA: (LSASpend.client_id, LSASpend.spend_date, LSASpend.spend, LSASpend.id),
    SpendFeed.SEO: (SEOSpend.client_id, SEOSpend.spend_date, SEOSpend.spend, SEOSpend.id),
}


class SpendRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_spend(
        self,
        feed: SpendFeed,
        client_id: int,
        start_date: date,
        end_date: date,
    ) -> list[SpendRecord]:
        """
        Return *feed* spend rows for *client_id* dated within
        ``[start_date, end_date]``. Rows with a NULL amount are skipped.
        """
        client_col, date_col, amount_col, id_col = _FEED_COLUMNS[SpendFeed(feed)]
        stmt = (
            select(date_col, amount_col)
            .where(
                client_col == client_id,
                date_col >= start_date,
                date_col <= end_date,
                amount_col.is_not(None),
            )
            .order_by(date_col, id_col)
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError(
                f"Failed to fetch {SpendFeed(feed).value} spend for client {client_id}."
            ) from exc

        records = [SpendRecord(spend_date=spend_date, amount=amount) for spend_date, amount in rows]
        logger.debug(
            "fetch_spend feed=%s client=%s [%s, %s] → %d rows",
            SpendFeed(feed).value, client_id, start_date.isoformat(), end_date.isoformat(), len(records),
        )
        return records

    def fetch_all(
        self,
        client_id: int,
        start_date: date,
        end_date: date,
    ) -> dict[SpendFeed, list[SpendRecord]]:
        """Fetch every feed for *client_id*; one query per feed."""
        return {
            feed: self.fetch_spend(feed, client_id, start_date, end_date)
            for feed in SpendFeed
        }
