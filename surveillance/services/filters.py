"""
Filter composition for test-result statistics.

Every statistics query narrows test results with the same optional
dimensions (free-text search, city name, region/city id and an
inclusive date range).  :func:`build_filter` turns a :class:`ReportFilter`
into a single ``Q`` expression so that all aggregates agree on which
rows count.  Building a filter never touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db.models import Exists, OuterRef, Q

from surveillance.models import TestResultPathogen

# Path from a TestResultPathogen row to its test result.
VIA_PATHOGEN_LINK = 'test_result__'


@dataclass(frozen=True)
class ReportFilter:
    search: Optional[str] = None
    city: Optional[str] = None
    region_id: Optional[int] = None
    city_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def dates_only(self) -> 'ReportFilter':
        """Copy of this filter keeping only the date range."""
        return ReportFilter(start_date=self.start_date, end_date=self.end_date)

    def describe(self) -> dict:
        return {k: v for k, v in self.__dict__.items() if v not in (None, '')}


def matching_pathogen_link(prefix: str = '', **lookups) -> Exists:
    """``EXISTS`` over the pathogen links of the test result at ``prefix``."""
    return Exists(
        TestResultPathogen.objects.filter(test_result=OuterRef(f'{prefix}pk'), **lookups)
    )


def is_positive(prefix: str = '') -> Exists:
    """A result is positive when it links at least one pathogen."""
    return matching_pathogen_link(prefix)


def build_date_filter(filters: Optional[ReportFilter], prefix: str = '') -> Q:
    q = Q()
    if filters is None:
        return q
    if filters.start_date is not None:
        q &= Q(**{f'{prefix}created_at__gte': filters.start_date})
    if filters.end_date is not None:
        q &= Q(**{f'{prefix}created_at__lte': filters.end_date})
    return q


def build_filter(filters: Optional[ReportFilter], prefix: str = '') -> Q:
    """Compose the conjunctive predicate for ``filters``.

    ``prefix`` is the lookup path from the queried model to
    ``TestResult`` (empty when querying test results directly,
    :data:`VIA_PATHOGEN_LINK` when querying pathogen links), so the
    predicate can be combined with whatever the caller already filters
    on.  With no dimensions set the result is an empty ``Q()``.
    """
    q = Q()
    if filters is None:
        return q

    if filters.search:
        term = filters.search
        q &= (
            Q(**{f'{prefix}city__name__icontains': term})
            | Q(**{f'{prefix}test_type__name__icontains': term})
            | Q(matching_pathogen_link(prefix, pathogen__name__icontains=term))
            | Q(**{f'{prefix}patient__identifier__icontains': term})
            | Q(**{f'{prefix}icp_number__icontains': term})
        )

    if filters.city:
        q &= Q(**{f'{prefix}city__name__icontains': filters.city})

    if filters.region_id is not None:
        q &= Q(**{f'{prefix}city__district__region_id': filters.region_id})

    if filters.city_id is not None:
        q &= Q(**{f'{prefix}city_id': filters.city_id})

    return q & build_date_filter(filters, prefix)
