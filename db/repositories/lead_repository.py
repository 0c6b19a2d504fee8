"""
db/repositories/lead_repository.py

Reads qualified leads from ``hmstr_leads``.

Range filtering happens here, in SQL: ``first_qual_date`` between the
requested start and end dates, both inclusive. The attribution engine buckets
whatever it receives and does not re-filter by date.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attribution.channels import NAMED_CHANNELS
from attribution.records import LeadRecord
from db.models.lead import Lead
from db.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)


class LeadRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_leads(self, client_id: int, start_date: date, end_date: date) -> list[LeadRecord]:
        """
        Return qualified leads for *client_id* with ``first_qual_date`` in
        ``[start_date, end_date]``, oldest first.
        """
        stmt = (
            select(
                Lead.first_qual_date,
                Lead.first_lead_source,
                Lead.hmstr_qualified_lead,
                Lead.lead_score_max,
                Lead.close_score_max,
            )
            .where(
                Lead.client_id == client_id,
                Lead.hmstr_qualified_lead.is_(True),
                Lead.first_qual_date >= start_date,
                Lead.first_qual_date <= end_date,
            )
            .order_by(Lead.first_qual_date, Lead.id)
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to fetch leads for client {client_id}.") from exc

        leads = [
            LeadRecord(
                qualification_date=row.first_qual_date,
                source_name=row.first_lead_source,
                is_qualified=bool(row.hmstr_qualified_lead),
                lead_score=row.lead_score_max,
                close_score=row.close_score_max,
            )
            for row in rows
        ]
        logger.debug(
            "fetch_leads client=%s [%s, %s] → %d rows",
            client_id, start_date.isoformat(), end_date.isoformat(), len(leads),
        )
        return leads

    def count_by_spc(self, client_id: int, start_date: date, end_date: date) -> dict[str, int]:
        """
        Count qualified leads per upstream ``spc`` channel label.

        Returns a dict with keys ``ppc``, ``lsa``, ``seo`` (zero when absent).
        Rows with any other label, or none, are ignored.
        """
        labels = [channel.value for channel in NAMED_CHANNELS]
        stmt = (
            select(Lead.spc, func.count())
            .where(
                Lead.client_id == client_id,
                Lead.hmstr_qualified_lead.is_(True),
                Lead.first_qual_date >= start_date,
                Lead.first_qual_date <= end_date,
                Lead.spc.in_(labels),
            )
            .group_by(Lead.spc)
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to count spc leads for client {client_id}.") from exc

        counts = dict.fromkeys(labels, 0)
        for label, count in rows:
            counts[label] = int(count)
        return counts
