"""
db/repositories/call_repository.py

Reads AI call-handling events from ``hmstr_ai_data``.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.ai_call import AICallRecord
from db.repositories.errors import RepositoryError


class CallRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_engagement_flags(
        self,
        client_id: int,
        start_date: date,
        end_date: date,
    ) -> list[bool | None]:
        """Return ``human_engaged`` for every call in ``[start_date, end_date]``."""
        stmt = select(AICallRecord.human_engaged).where(
            AICallRecord.client_id == client_id,
            AICallRecord.action_date >= start_date,
            AICallRecord.action_date <= end_date,
        )
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to fetch call data for client {client_id}.") from exc
