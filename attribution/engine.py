"""
attribution/engine.py

Channel attribution and time-bucket aggregation.

:func:`aggregate` is a pure function over fully materialised inputs::

    (leads, spends by feed, channel rule, group_by) → AggregationResult

Passes
------
1. Leads   – drop unqualified leads, classify by the channel rule, bucket by
             qualification date, accumulate counts and score sums.
2. Spend   – one pass per feed; convert the feed's raw unit to currency and
             add it to the feed's channel and to ``all`` in the spend date's
             bucket. Spend creates a bucket even when no lead fell into it.
3. Totals  – sum every bucket into a single range-wide row.
4. Global  – distribute each channel's range cost onto buckets in proportion
             to their lead share (``allocated_cost``) and report the flat
             range cost per lead (``cost_per_lead_global``) on every bucket
             where the channel has leads.

Per-bucket ``cost_per_lead`` (``total_cost / count`` of the bucket itself)
is the canonical figure; the global fields sit alongside it and never
replace it.

Bad records
-----------
A negative, NaN or infinite score or spend amount excludes that record and
appends a :class:`~attribution.errors.DataIntegrityWarning`. A missing score
counts as zero. The range filter is the caller's job; records are bucketed
as received.

No I/O, no logging, no side effects.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

from attribution.bucketing import Granularity, key_for, parse_granularity
from attribution.channels import ChannelRule, StaticRules
from attribution.errors import ConfigurationError, DataIntegrityWarning
from attribution.records import (
    AggregationResult,
    BucketMetrics,
    LeadRecord,
    SpendFeed,
    SpendRecord,
)

TOTALS_KEY = "total"

SpendInputs = Mapping[SpendFeed | str, Sequence[SpendRecord]]


def aggregate(
    leads: Iterable[LeadRecord],
    spends: SpendInputs | None = None,
    rule: ChannelRule | None = None,
    group_by: Granularity | str = Granularity.DAY,
) -> AggregationResult:
    """
    Aggregate leads and spend into per-bucket and range-wide channel metrics.

    Parameters
    ----------
    leads:
        Lead records already filtered to the requested date range.
    spends:
        Spend records keyed by feed (``"ppc"``, ``"lsa"``, ``"seo"``). PPC
        amounts are in micros; LSA and SEO amounts are in currency units.
        Missing feeds are treated as empty.
    rule:
        The channel rule in effect for the client. ``None`` selects the
        built-in :class:`~attribution.channels.StaticRules`.
    group_by:
        ``"day"``, ``"week"`` or ``"month"``.

    Returns
    -------
    AggregationResult
        Buckets sorted by key, a totals row and any data-integrity warnings.

    Raises
    ------
    ConfigurationError
        If *group_by* or a spend feed name is not recognised.
    """
    grain = parse_granularity(group_by)
    feeds = _normalise_feeds(spends)
    active_rule = rule if rule is not None else StaticRules()

    buckets: dict[str, BucketMetrics] = {}
    warnings: list[DataIntegrityWarning] = []

    def row_for(key: str) -> BucketMetrics:
        row = buckets.get(key)
        if row is None:
            row = buckets[key] = BucketMetrics(bucket_key=key)
        return row

    for index, lead in enumerate(leads):
        if not lead.is_qualified:
            continue
        lead_score = _checked(lead.lead_score, "lead", index, "lead_score", warnings)
        close_score = _checked(lead.close_score, "lead", index, "close_score", warnings)
        if lead_score is None or close_score is None:
            continue

        row = row_for(key_for(lead.qualification_date, grain))
        row.all.add_lead(lead_score, close_score)
        for channel in active_rule.classify(lead.source_name):
            row.channel(channel).add_lead(lead_score, close_score)

    for feed in SpendFeed:
        for index, record in enumerate(feeds.get(feed, ())):
            amount = _checked(record.amount, feed.value, index, "amount", warnings)
            if amount is None:
                continue
            cost = feed.to_currency(amount)
            row = row_for(key_for(record.spend_date, grain))
            row.channel(feed.channel).total_cost += cost
            row.all.total_cost += cost

    rows = [buckets[key] for key in sorted(buckets)]
    totals = _sum_rows(rows)
    _distribute_global_cost(rows, totals)

    return AggregationResult(buckets=rows, totals=totals, warnings=warnings)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalise_feeds(spends: SpendInputs | None) -> dict[SpendFeed, Sequence[SpendRecord]]:
    if not spends:
        return {}
    normalised: dict[SpendFeed, Sequence[SpendRecord]] = {}
    for name, records in spends.items():
        try:
            feed = SpendFeed(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown spend feed {name!r}. Valid feeds: {[f.value for f in SpendFeed]}"
            ) from None
        normalised[feed] = records or ()
    return normalised


def _checked(
    value: float | None,
    record_kind: str,
    index: int,
    field_name: str,
    warnings: list[DataIntegrityWarning],
) -> float | None:
    """Return *value* as a float, or ``None`` after recording why it was rejected."""
    if value is None:
        return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError):
        reason = "not a number"
    else:
        if not math.isfinite(number):
            reason = "not a finite number"
        elif number < 0:
            reason = "negative"
        else:
            return number

    warnings.append(
        DataIntegrityWarning(
            record_kind=record_kind,
            index=index,
            field=field_name,
            value=value,
            reason=reason,
        )
    )
    return None


def _sum_rows(rows: Sequence[BucketMetrics]) -> BucketMetrics:
    totals = BucketMetrics(bucket_key=TOTALS_KEY)
    for row in rows:
        for name, metrics in row.channels().items():
            totals.channel(name).merge(metrics)
    return totals


def _distribute_global_cost(rows: Sequence[BucketMetrics], totals: BucketMetrics) -> None:
    for name, total in totals.channels().items():
        total.allocated_cost = total.total_cost
        total.cost_per_lead_global = total.cost_per_lead
        for row in rows:
            metrics = row.channel(name)
            if not metrics.count:
                continue
            metrics.allocated_cost = total.total_cost * metrics.count / total.count
            metrics.cost_per_lead_global = total.cost_per_lead
