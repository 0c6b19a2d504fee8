"""
app/services/dashboard_service.py

Dashboard pipeline.

Wires the repositories to the attribution engine for one request::

    ClientRepository  – channel rule in effect for the client
    LeadRepository    – qualified leads in range
    SpendRepository   – PPC / LSA / SEO spend in range
    aggregate()       – attribution, bucketing, cost per lead

No arithmetic lives here beyond the call-engagement rate; every number the
dashboard shows for leads and spend comes out of :func:`attribution.engine.aggregate`.

Failure contract
----------------
- ``start_date > end_date``     → :class:`~app.services.date_ranges.InvalidRangeError`
                                  before any query is issued
- unknown ``group_by``          → :class:`~attribution.errors.ConfigurationError`
- database failure              → :class:`~db.repositories.errors.RepositoryError`
- bad score / spend values      → logged at WARNING, returned in ``warnings``;
                                  the report is still produced
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from app.services.date_ranges import validate_range
from attribution.bucketing import Granularity, parse_granularity
from attribution.channels import NAMED_CHANNELS
from attribution.engine import aggregate
from attribution.records import BucketMetrics
from db.repositories.call_repository import CallRepository
from db.repositories.client_repository import ClientRepository
from db.repositories.lead_repository import LeadRepository
from db.repositories.spend_repository import SpendRepository
from db.repositories.types import ClientSummary

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelReport:
    """
    Aggregated channel metrics for one client and date range.

    ``buckets`` is sorted by bucket key; ``totals`` is the range-wide row.
    ``warnings`` holds a description of every record the engine excluded.
    """

    client_id: int
    start_date: date
    end_date: date
    group_by: Granularity
    buckets: list[BucketMetrics]
    totals: BucketMetrics
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SpcCrossCheck:
    """Engine channel counts side by side with the upstream ``spc`` labels."""

    engine_counts: dict[str, int]
    spc_counts: dict[str, int]

    @property
    def mismatched_channels(self) -> list[str]:
        return [
            name
            for name in self.engine_counts
            if self.engine_counts[name] != self.spc_counts.get(name, 0)
        ]

    @property
    def consistent(self) -> bool:
        return not self.mismatched_channels


@dataclass(frozen=True)
class CallEngagement:
    total_calls: int
    engaged_calls: int

    @property
    def engage_rate(self) -> float | None:
        """Share of calls a human engaged with, in percent; ``None`` without calls."""
        if not self.total_calls:
            return None
        return round(self.engaged_calls / self.total_calls * 100, 2)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class DashboardService:
    """
    Request-scoped dashboard facade.

    Repositories are built from the session passed in; the service holds
    no state between calls.
    """

    def __init__(self, session: Session) -> None:
        self._clients = ClientRepository(session)
        self._leads = LeadRepository(session)
        self._spend = SpendRepository(session)
        self._calls = CallRepository(session)

    def list_clients(self) -> list[ClientSummary]:
        return self._clients.list_clients()

    def build_report(
        self,
        client_id: int,
        start_date: date,
        end_date: date,
        group_by: Granularity | str = Granularity.DAY,
        *,
        include_spend: bool = True,
    ) -> ChannelReport:
        """
        Fetch, attribute and aggregate one client's leads and spend.

        Parameters
        ----------
        client_id:
            Dashboard client id (``clients_ffs.client_id``).
        start_date, end_date:
            Inclusive range; applied by the repositories.
        group_by:
            ``"day"``, ``"week"`` or ``"month"``.
        include_spend:
            Skip the three spend queries when only lead counts are needed.
        """
        grain = parse_granularity(group_by)
        validate_range(start_date, end_date)

        run_start = time.monotonic()
        rule = self._clients.get_channel_rule(client_id)
        leads = self._leads.fetch_leads(client_id, start_date, end_date)
        spends = self._spend.fetch_all(client_id, start_date, end_date) if include_spend else {}

        result = aggregate(leads, spends, rule, grain)

        warnings = [w.describe() for w in result.warnings]
        for message in warnings:
            logger.warning("client=%s data integrity: %s", client_id, message)

        logger.info(
            "build_report client=%s [%s, %s] group_by=%s rule=%s leads=%d buckets=%d "
            "warnings=%d elapsed=%.3fs",
            client_id,
            start_date.isoformat(),
            end_date.isoformat(),
            grain.value,
            type(rule).__name__,
            len(leads),
            len(result.buckets),
            len(warnings),
            time.monotonic() - run_start,
        )

        return ChannelReport(
            client_id=client_id,
            start_date=start_date,
            end_date=end_date,
            group_by=grain,
            buckets=result.buckets,
            totals=result.totals,
            warnings=warnings,
        )

    def top_metrics(self, client_id: int, start_date: date, end_date: date) -> ChannelReport:
        """Range totals for the metric cards; ``report.totals`` is the payload."""
        return self.build_report(client_id, start_date, end_date, Granularity.DAY)

    def lead_series(
        self,
        client_id: int,
        start_date: date,
        end_date: date,
        group_by: Granularity | str,
    ) -> ChannelReport:
        return self.build_report(client_id, start_date, end_date, group_by, include_spend=False)

    def cost_series(
        self,
        client_id: int,
        start_date: date,
        end_date: date,
        group_by: Granularity | str,
    ) -> ChannelReport:
        return self.build_report(client_id, start_date, end_date, group_by)

    def spc_cross_check(self, client_id: int, start_date: date, end_date: date) -> SpcCrossCheck:
        """
        Compare engine attribution with the upstream pre-classified ``spc``
        counts over the same range.
        """
        report = self.lead_series(client_id, start_date, end_date, Granularity.MONTH)
        engine_counts = {
            channel.value: report.totals.channel(channel).count for channel in NAMED_CHANNELS
        }
        spc_counts = self._leads.count_by_spc(client_id, start_date, end_date)
        check = SpcCrossCheck(engine_counts=engine_counts, spc_counts=spc_counts)
        if not check.consistent:
            logger.info(
                "spc_cross_check client=%s mismatched=%s engine=%s spc=%s",
                client_id, check.mismatched_channels, engine_counts, spc_counts,
            )
        return check

    def call_engagement(self, client_id: int, start_date: date, end_date: date) -> CallEngagement:
        validate_range(start_date, end_date)
        flags = self._calls.fetch_engagement_flags(client_id, start_date, end_date)
        return CallEngagement(
            total_calls=len(flags),
            engaged_calls=sum(1 for flag in flags if flag is True),
        )
