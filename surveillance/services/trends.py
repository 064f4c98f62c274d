"""
Gap-filled time series of positive test results per pathogen.

The series is built in two steps: first every period bucket between the
start and end date and every pathogen observed in the filtered window
are materialised, then the per-bucket counts computed by the database
are outer-joined onto that grid with missing cells defaulting to zero.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from django.conf import settings
from django.db.models import Count, DateTimeField, F
from django.db.models.functions import Trunc
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from surveillance.services.aggregates import filtered_pathogen_links
from surveillance.services.audience import Audience
from surveillance.services.filters import ReportFilter

logger = logging.getLogger(__name__)

PERIODS = ('day', 'week', 'month')


def _local_date(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def truncate(value, period: str) -> date:
    """Start of the day, ISO week (Monday) or calendar month containing ``value``."""
    d = _local_date(value)
    if period == 'week':
        return d - timedelta(days=d.weekday())
    if period == 'month':
        return d.replace(day=1)
    return d


def _step(d: date, period: str) -> date:
    if period == 'week':
        return d + timedelta(weeks=1)
    if period == 'month':
        return date(d.year + d.month // 12, d.month % 12 + 1, 1)
    return d + timedelta(days=1)


def count_buckets(start, end, period: str) -> int:
    first, last = truncate(start, period), truncate(end, period)
    if last < first:
        return 0
    if period == 'month':
        return (last.year - first.year) * 12 + last.month - first.month + 1
    days = (last - first).days
    return days // 7 + 1 if period == 'week' else days + 1


def period_buckets(start, end, period: str = 'day') -> list[date]:
    """Every bucket start from ``start`` to ``end`` inclusive, in order."""
    if period not in PERIODS:
        raise ValidationError({'period': f'Period must be one of: {", ".join(PERIODS)}'})
    buckets = []
    current, last = truncate(start, period), truncate(end, period)
    while current <= last:
        buckets.append(current)
        current = _step(current, period)
    return buckets


def positive_trends_by_pathogens(audience: Audience, filters: Optional[ReportFilter], period: str = 'day') -> dict:
    """Positive results per bucket and pathogen, plus a per-bucket total.

    ``filters`` must carry both a start and an end date.  Buckets and
    pathogen combinations without observations are reported with a zero
    count; ``total`` always holds exactly one entry per bucket.
    """
    if filters is None or filters.start_date is None or filters.end_date is None:
        raise ValidationError({'detail': 'startDate and endDate are required for trends'})
    if period not in PERIODS:
        raise ValidationError({'period': f'Period must be one of: {", ".join(PERIODS)}'})
    if count_buckets(filters.start_date, filters.end_date, period) > settings.STATISTICS_MAX_BUCKETS:
        raise ValidationError({'detail': 'date range too large for the selected period'})

    buckets = period_buckets(filters.start_date, filters.end_date, period)
    links = filtered_pathogen_links(audience, filters)

    observed = (
        links.annotate(bucket=Trunc('test_result__created_at', period, output_field=DateTimeField()))
        .values('bucket', pathogen_name=F('pathogen__name'))
        .annotate(count=Count('pk'))
        .order_by()
    )
    counts = {}
    for row in observed:
        key = (_local_date(row['bucket']), row['pathogen_name'])
        counts[key] = counts.get(key, 0) + row['count']
    pathogens = sorted({name for _, name in counts})
    logger.debug('trend %s over %d buckets for %s: %d pathogens', period, len(buckets), audience, len(pathogens))

    # with nothing observed, one placeholder row per bucket keeps the total populated
    grid = [(b, name) for b in buckets for name in (pathogens or [None])]

    by_pathogen = []
    totals = {b: 0 for b in buckets}
    for bucket, name in grid:
        count = counts.get((bucket, name), 0)
        totals[bucket] += count
        if name is not None:
            by_pathogen.append({'date': bucket.isoformat(), 'pathogenName': name, 'count': count})

    return {
        'byPathogen': by_pathogen,
        'total': [{'date': b.isoformat(), 'count': totals[b]} for b in buckets],
    }
