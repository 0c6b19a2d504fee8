"""
app/api/routers/dashboard_router.py

Dashboard endpoints.

Each endpoint resolves the requested date range, runs the dashboard service
for one client and shapes the result for its card or chart. The range is a
named ``preset`` (``last_7``, ``last_30``, ``last_90``, ``last_month``),
explicit ``start_date`` / ``end_date``, or by default the last
``DASHBOARD_DEFAULT_RANGE_DAYS`` days.

Error mapping
-------------
- unknown ``group_by`` or ``preset``, ``start_date > end_date``  → HTTP 400
- database read failure                                          → HTTP 503
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import get_dashboard_settings
from app.schemas.dashboard import (
    CallDataResponse,
    ChannelMetricsResponse,
    ChannelValues,
    ClientResponse,
    CostSeriesPoint,
    CostSeriesResponse,
    LeadSeriesPoint,
    LeadSeriesResponse,
    SpcCheckResponse,
    TopMetricsResponse,
)
from app.services.dashboard_service import DashboardService
from app.services.date_ranges import PRESETS, InvalidRangeError, resolve_preset, resolve_range
from attribution.errors import ConfigurationError
from attribution.records import BucketMetrics
from db.repositories.errors import RepositoryError
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

T = TypeVar("T")


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_dates(
    start_date: date | None,
    end_date: date | None,
    preset: str | None = None,
) -> tuple[date, date]:
    """
    Resolve the request range from a named preset or explicit dates.

    A preset cannot be combined with ``start_date`` / ``end_date``.
    """
    settings = get_dashboard_settings()
    today = date.today()
    try:
        if preset is None:
            return resolve_range(start_date, end_date, today, settings.default_range_days)
        if start_date is not None or end_date is not None:
            raise InvalidRangeError("preset cannot be combined with start_date or end_date")
        return resolve_preset(preset, today)
    except InvalidRangeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _run(action: Callable[[], T]) -> T:
    try:
        return action()
    except (ConfigurationError, InvalidRangeError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryError as exc:
        logger.error("Dashboard query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dashboard data is temporarily unavailable.",
        ) from exc


def _channel_values(row: BucketMetrics, attribute: str) -> ChannelValues:
    return ChannelValues(
        **{name: getattr(metrics, attribute) for name, metrics in row.channels().items()}
    )


def _cost_point(row: BucketMetrics, label: str) -> CostSeriesPoint:
    return CostSeriesPoint(
        date=label,
        cost=_channel_values(row, "total_cost"),
        cost_per_lead=_channel_values(row, "cost_per_lead"),
        cost_per_lead_global=_channel_values(row, "cost_per_lead_global"),
        allocated_cost=_channel_values(row, "allocated_cost"),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/clients", response_model=list[ClientResponse])
def list_clients(service: DashboardService = Depends(get_dashboard_service)) -> list[ClientResponse]:
    clients = _run(service.list_clients)
    return [ClientResponse.model_validate(client) for client in clients]


@router.get("/{client_id}/top-metrics", response_model=TopMetricsResponse)
def top_metrics(
    client_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    preset: str | None = Query(default=None, description=f"One of {list(PRESETS)}"),
    service: DashboardService = Depends(get_dashboard_service),
) -> TopMetricsResponse:
    """
    Qualified-lead counts, cost, cost per lead and average lead / sales
    scores per channel over the whole range.
    """
    start, end = _resolve_dates(start_date, end_date, preset)
    report = _run(lambda: service.top_metrics(client_id, start, end))
    channels = {
        name: ChannelMetricsResponse(**metrics.as_dict())
        for name, metrics in report.totals.channels().items()
    }
    return TopMetricsResponse(
        client_id=client_id,
        start_date=start,
        end_date=end,
        other_count=report.totals.other_count,
        warnings=report.warnings,
        **channels,
    )


@router.get("/{client_id}/lead-metrics", response_model=LeadSeriesResponse)
def lead_metrics(
    client_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    preset: str | None = Query(default=None, description=f"One of {list(PRESETS)}"),
    group_by: str | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> LeadSeriesResponse:
    """Qualified leads per bucket, split by channel."""
    start, end = _resolve_dates(start_date, end_date, preset)
    grain = group_by or get_dashboard_settings().default_group_by
    report = _run(lambda: service.lead_series(client_id, start, end, grain))
    points = [
        LeadSeriesPoint(
            date=row.bucket_key,
            all=row.all.count,
            ppc=row.ppc.count,
            lsa=row.lsa.count,
            seo=row.seo.count,
            other=row.other_count,
        )
        for row in report.buckets
    ]
    return LeadSeriesResponse(
        client_id=client_id,
        start_date=start,
        end_date=end,
        group_by=report.group_by.value,
        points=points,
        warnings=report.warnings,
    )


@router.get("/{client_id}/cost-per-lead", response_model=CostSeriesResponse)
def cost_per_lead(
    client_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    preset: str | None = Query(default=None, description=f"One of {list(PRESETS)}"),
    group_by: str | None = Query(default=None),
    service: DashboardService = Depends(get_dashboard_service),
) -> CostSeriesResponse:
    """
    Cost per qualified lead over time.

    Every bucket carrying leads or spend is returned, so spend totals
    reconcile with the top-metrics cost even on days without leads.
    """
    start, end = _resolve_dates(start_date, end_date, preset)
    grain = group_by or get_dashboard_settings().default_group_by
    report = _run(lambda: service.cost_series(client_id, start, end, grain))
    return CostSeriesResponse(
        client_id=client_id,
        start_date=start,
        end_date=end,
        group_by=report.group_by.value,
        points=[_cost_point(row, row.bucket_key) for row in report.buckets],
        totals=_cost_point(report.totals, report.totals.bucket_key),
        warnings=report.warnings,
    )


@router.get("/{client_id}/call-data", response_model=CallDataResponse)
def call_data(
    client_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    preset: str | None = Query(default=None, description=f"One of {list(PRESETS)}"),
    service: DashboardService = Depends(get_dashboard_service),
) -> CallDataResponse:
    """Human engage rate of AI-handled calls; ``engage_rate`` is null without calls."""
    start, end = _resolve_dates(start_date, end_date, preset)
    engagement = _run(lambda: service.call_engagement(client_id, start, end))
    return CallDataResponse(
        client_id=client_id,
        start_date=start,
        end_date=end,
        total_calls=engagement.total_calls,
        engaged_calls=engagement.engaged_calls,
        engage_rate=engagement.engage_rate,
    )


@router.get("/{client_id}/spc-check", response_model=SpcCheckResponse)
def spc_check(
    client_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    preset: str | None = Query(default=None, description=f"One of {list(PRESETS)}"),
    service: DashboardService = Depends(get_dashboard_service),
) -> SpcCheckResponse:
    start, end = _resolve_dates(start_date, end_date, preset)
    check = _run(lambda: service.spc_cross_check(client_id, start, end))
    return SpcCheckResponse(
        client_id=client_id,
        start_date=start,
        end_date=end,
        engine_counts=check.engine_counts,
        spc_counts=check.spc_counts,
        mismatched_channels=check.mismatched_channels,
        consistent=check.consistent,
    )
