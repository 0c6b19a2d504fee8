"""
app/schemas/dashboard.py

Response schemas for dashboard endpoints.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class ClientResponse(BaseModel):
    client_id: int
    name: str

    model_config = {"from_attributes": True}


class ChannelMetricsResponse(BaseModel):
    """
    API response model for one channel's aggregate.
    """

    count: int = Field(..., ge=0)
    total_lead_score: float = Field(..., ge=0)
    total_close_score: float = Field(..., ge=0)
    total_cost: float = Field(..., ge=0)
    avg_lead_score: float = Field(..., ge=0)
    avg_close_score: float = Field(..., ge=0)
    cost_per_lead: float = Field(..., ge=0)
    allocated_cost: float = Field(..., ge=0)
    cost_per_lead_global: float = Field(..., ge=0)


class ChannelValues(BaseModel):
    all: float = 0.0
    ppc: float = 0.0
    lsa: float = 0.0
    seo: float = 0.0


class TopMetricsResponse(BaseModel):
    """
    Range totals backing the metric cards and the channel pie chart.
    """

    client_id: int
    start_date: date
    end_date: date
    all: ChannelMetricsResponse
    ppc: ChannelMetricsResponse
    lsa: ChannelMetricsResponse
    seo: ChannelMetricsResponse
    other_count: int = Field(..., ge=0)
    warnings: list[str] = Field(default_factory=list)


class LeadSeriesPoint(BaseModel):
    date: str
    all: int = Field(..., ge=0)
    ppc: int = Field(..., ge=0)
    lsa: int = Field(..., ge=0)
    seo: int = Field(..., ge=0)
    other: int = Field(..., ge=0)


class LeadSeriesResponse(BaseModel):
    client_id: int
    start_date: date
    end_date: date
    group_by: str
    points: list[LeadSeriesPoint]
    warnings: list[str] = Field(default_factory=list)


class CostSeriesPoint(BaseModel):
    """
    One chart point of the cost-per-qualified-lead series.

    ``cost_per_lead`` divides each bucket's own spend by its own leads.
    ``cost_per_lead_global`` is the range-wide figure, reported on buckets
    where the channel had leads.
    """

    date: str
    cost: ChannelValues
    cost_per_lead: ChannelValues
    cost_per_lead_global: ChannelValues
    allocated_cost: ChannelValues


class CostSeriesResponse(BaseModel):
    client_id: int
    start_date: date
    end_date: date
    group_by: str
    points: list[CostSeriesPoint]
    totals: CostSeriesPoint
    warnings: list[str] = Field(default_factory=list)


class CallDataResponse(BaseModel):
    client_id: int
    start_date: date
    end_date: date
    total_calls: int = Field(..., ge=0)
    engaged_calls: int = Field(..., ge=0)
    engage_rate: float | None = None


class SpcCheckResponse(BaseModel):
    client_id: int
    start_date: date
    end_date: date
    engine_counts: dict[str, int]
    spc_counts: dict[str, int]
    mismatched_channels: list[str] = Field(default_factory=list)
    consistent: bool
