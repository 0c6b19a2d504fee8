"""
attribution/records.py

Typed inputs and outputs of the attribution engine.

Inputs (``LeadRecord``, ``SpendRecord``) are immutable snapshots produced by
the data-access layer. Outputs (``ChannelMetrics``, ``BucketMetrics``,
``AggregationResult``) are rebuilt on every call and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from attribution.channels import NAMED_CHANNELS, Channel
from attribution.errors import DataIntegrityWarning

ALL = "all"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LeadRecord:
    """One marketing lead event as fetched from the lead table."""

    qualification_date: date | datetime
    source_name: str | None
    is_qualified: bool = True
    lead_score: float | None = 0.0
    close_score: float | None = 0.0


class SpendFeed(str, Enum):
    """
    Channel-specific spend feed.

    The PPC feed stores ``cost_micros`` (currency × 1,000,000); the LSA and
    SEO feeds store ``spend`` directly in currency units.
    """

    PPC = "ppc"
    LSA = "lsa"
    SEO = "seo"

    @property
    def channel(self) -> Channel:
        return Channel(self.value)

    @property
    def units_per_currency(self) -> int:
        return 1_000_000 if self is SpendFeed.PPC else 1

    def to_currency(self, raw_amount: float) -> float:
        return raw_amount / self.units_per_currency


@dataclass(frozen=True)
class SpendRecord:
    """One day of spend from one feed, in the feed's raw unit."""

    spend_date: date | datetime
    amount: float


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass
class ChannelMetrics:
    """
    Aggregate for one channel, either within one bucket or over the range.

    ``allocated_cost`` and ``cost_per_lead_global`` carry the range-wide
    cost figure distributed onto a bucket; on a totals row they equal
    ``total_cost`` and ``cost_per_lead``.
    """

    count: int = 0
    total_lead_score: float = 0.0
    total_close_score: float = 0.0
    total_cost: float = 0.0
    allocated_cost: float = 0.0
    cost_per_lead_global: float = 0.0

    @property
    def avg_lead_score(self) -> float:
        return _ratio(self.total_lead_score, self.count)

    @property
    def avg_close_score(self) -> float:
        return _ratio(self.total_close_score, self.count)

    @property
    def cost_per_lead(self) -> float:
        return _ratio(self.total_cost, self.count)

    def add_lead(self, lead_score: float, close_score: float) -> None:
        self.count += 1
        self.total_lead_score += lead_score
        self.total_close_score += close_score

    def merge(self, other: ChannelMetrics) -> None:
        self.count += other.count
        self.total_lead_score += other.total_lead_score
        self.total_close_score += other.total_close_score
        self.total_cost += other.total_cost

    def as_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "total_lead_score": self.total_lead_score,
            "total_close_score": self.total_close_score,
            "total_cost": self.total_cost,
            "avg_lead_score": self.avg_lead_score,
            "avg_close_score": self.avg_close_score,
            "cost_per_lead": self.cost_per_lead,
            "allocated_cost": self.allocated_cost,
            "cost_per_lead_global": self.cost_per_lead_global,
        }


@dataclass
class BucketMetrics:
    """Per-channel metrics for one time bucket (or for the whole range)."""

    bucket_key: str
    all: ChannelMetrics = field(default_factory=ChannelMetrics)
    ppc: ChannelMetrics = field(default_factory=ChannelMetrics)
    lsa: ChannelMetrics = field(default_factory=ChannelMetrics)
    seo: ChannelMetrics = field(default_factory=ChannelMetrics)

    def channel(self, name: Channel | str) -> ChannelMetrics:
        key = name.value if isinstance(name, Channel) else name
        if key not in (ALL, *(c.value for c in NAMED_CHANNELS)):
            raise KeyError(key)
        return getattr(self, key)

    def channels(self) -> dict[str, ChannelMetrics]:
        return {ALL: self.all, "ppc": self.ppc, "lsa": self.lsa, "seo": self.seo}

    @property
    def other_count(self) -> int:
        """Leads credited to no named channel (exact when rule sets are disjoint)."""
        named = self.ppc.count + self.lsa.count + self.seo.count
        return max(0, self.all.count - named)


@dataclass
class AggregationResult:
    buckets: list[BucketMetrics]
    totals: BucketMetrics
    warnings: list[DataIntegrityWarning] = field(default_factory=list)

    @property
    def bucket_keys(self) -> list[str]:
        return [b.bucket_key for b in self.buckets]

    def bucket(self, key: str) -> BucketMetrics | None:
        for row in self.buckets:
            if row.bucket_key == key:
                return row
        return None
