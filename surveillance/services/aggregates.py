"""
Aggregate statistics over test results.

Every function takes an :class:`~surveillance.services.audience.Audience`
(whose results) and an optional
:class:`~surveillance.services.filters.ReportFilter` (which of them), and
returns plain dicts/lists ready to be serialised.  Counting is done by
the database; only gap filling and percentage rounding happen here.
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.db.models import Count, F, Q

from surveillance.models import TestResult, TestResultPathogen
from surveillance.services.age_groups import AGE_GROUP_KEYS, AGE_GROUP_LABELS, empty_age_buckets, with_age_group
from surveillance.services.audience import Audience
from surveillance.services.filters import VIA_PATHOGEN_LINK, ReportFilter, build_filter, is_positive
from surveillance.services.scopes import resolve_scopes

logger = logging.getLogger(__name__)


def filtered_results(audience: Audience, filters: Optional[ReportFilter]):
    return TestResult.objects.filter(audience.to_q(), build_filter(filters))


def filtered_pathogen_links(audience: Audience, filters: Optional[ReportFilter]):
    """One row per (test result, detected pathogen) pair.

    A result with several pathogens appears once per pathogen, so counts
    over this queryset fan out.
    """
    return TestResultPathogen.objects.filter(
        audience.to_q(VIA_PATHOGEN_LINK), build_filter(filters, VIA_PATHOGEN_LINK)
    )


def positive_negative_counts(audience: Audience, filters: Optional[ReportFilter] = None) -> dict:
    logger.debug('positive/negative counts for %s with %s', audience, filters)
    positive = is_positive()
    row = filtered_results(audience, filters).aggregate(
        positive=Count('pk', filter=Q(positive)),
        negative=Count('pk', filter=~Q(positive)),
    )
    return {
        'positive': row['positive'] or 0,
        'negative': row['negative'] or 0,
    }


def positive_by_age_groups(audience: Audience, filters: Optional[ReportFilter] = None) -> dict:
    logger.debug('age group counts for %s with %s', audience, filters)
    qs = with_age_group(filtered_results(audience, filters).filter(is_positive()))
    rows = qs.filter(age_group__isnull=False).values('age_group').annotate(count=Count('pk')).order_by()

    buckets = empty_age_buckets()
    for row in rows:
        buckets[AGE_GROUP_KEYS[row['age_group']]] = row['count']
    return buckets


def positive_by_pathogens(audience: Audience, filters: Optional[ReportFilter] = None) -> list[dict]:
    """Positive results per pathogen, most frequent first."""
    logger.debug('pathogen counts for %s with %s', audience, filters)
    rows = (
        filtered_pathogen_links(audience, filters)
        .values(pathogen_name=F('pathogen__name'))
        .annotate(count=Count('pk'))
        .order_by('-count', 'pathogen_name')
    )
    return [{'pathogenName': r['pathogen_name'] or 'Unknown', 'count': r['count']} for r in rows]


def positive_pathogens_by_age_groups(audience: Audience, filters: Optional[ReportFilter] = None) -> list[dict]:
    logger.debug('pathogen x age group counts for %s with %s', audience, filters)
    qs = with_age_group(filtered_pathogen_links(audience, filters), VIA_PATHOGEN_LINK)
    rows = (
        qs.filter(age_group__isnull=False)
        .values('age_group', pathogen_name=F('pathogen__name'))
        .annotate(count=Count('pk'))
        .order_by()
    )
    data = [
        {'pathogenName': r['pathogen_name'] or 'Unknown', 'ageGroup': r['age_group'], 'count': r['count']}
        for r in rows
    ]
    data.sort(key=lambda d: (d['pathogenName'], AGE_GROUP_LABELS.index(d['ageGroup'])))
    return data


def _percentage(count: int, total: int) -> float:
    if not total:
        return 0.0
    value = Decimal(count) * 100 / Decimal(total)
    return float(value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def pathogen_distribution(audience: Audience, filters: Optional[ReportFilter] = None) -> list[dict]:
    """Per-pathogen counts with each pathogen's share of the audience total."""
    if audience.is_empty:
        return []
    counts = positive_by_pathogens(audience, filters)
    total = sum(c['count'] for c in counts)
    return [{**c, 'percentage': _percentage(c['count'], total)} for c in counts]


def pathogen_distribution_by_scope(doctor_id, filters: Optional[ReportFilter] = None, *,
                                   region_id: Optional[int] = None, city_id: Optional[int] = None) -> dict:
    """Pathogen distribution for the doctor, their district, region and country.

    Only the date range of ``filters`` applies to the scopes.  Raises
    :class:`~surveillance.services.scopes.DoctorNotFound` for an unknown
    doctor; unresolvable overrides produce empty lists.
    """
    scopes = resolve_scopes(doctor_id, region_id=region_id, city_id=city_id)
    dates = filters.dates_only() if filters is not None else None
    return {name: pathogen_distribution(audience, dates) for name, audience in scopes.items()}
