"""
db/repositories/client_repository.py

Reads client settings from ``clients_ffs``.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attribution.channels import ChannelRule, StaticRules, resolve_channel_rule
from db.models.client_settings import ClientSettings
from db.repositories.errors import RepositoryError
from db.repositories.types import ClientSummary

logger = logging.getLogger(__name__)


class ClientRepository:
    """
    Read-only access to per-client dashboard configuration.

    Parameters
    ----------
    session:
        Active SQLAlchemy session. The caller controls its lifecycle.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_clients(self) -> list[ClientSummary]:
        """
        Return every client ordered by company name, unnamed clients last.

        Clients without a company name are listed under their numeric id,
        after the named ones and in id order on every backend.
        """
        stmt = select(ClientSettings.client_id, ClientSettings.cr_company_name).order_by(
            ClientSettings.cr_company_name.is_(None),
            ClientSettings.cr_company_name,
            ClientSettings.client_id,
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError("Failed to list clients.") from exc

        return [
            ClientSummary(client_id=client_id, name=name or str(client_id))
            for client_id, name in rows
        ]

    def get_channel_rule(self, client_id: int) -> ChannelRule:
        """
        Return the channel rule in effect for *client_id*.

        Falls back to :class:`~attribution.channels.StaticRules` when the
        client has no settings row or none of its source lists is populated.
        """
        try:
            settings = self._session.get(ClientSettings, client_id)
        except SQLAlchemyError as exc:
            raise RepositoryError(f"Failed to load settings for client {client_id}.") from exc

        if settings is None:
            logger.debug("get_channel_rule client=%s: no settings row, using static rules", client_id)
            return StaticRules()

        rule = resolve_channel_rule(
            settings.ppc_sources,
            settings.lsa_sources,
            settings.seo_sources,
        )
        logger.debug("get_channel_rule client=%s → %s", client_id, type(rule).__name__)
        return rule
