from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from surveillance.services.audience import Audience
from surveillance.services.filters import ReportFilter
from surveillance.services.trends import count_buckets, period_buckets, positive_trends_by_pathogens, truncate


def at(*args):
    return timezone.make_aware(datetime(*args))


def test_daily_buckets_are_inclusive():
    assert period_buckets(date(2024, 2, 27), date(2024, 3, 1)) == [
        date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1),
    ]


def test_weekly_buckets_start_on_monday():
    # 2024-01-03 is a Wednesday
    assert truncate(date(2024, 1, 3), 'week') == date(2024, 1, 1)
    assert period_buckets(date(2024, 1, 3), date(2024, 1, 22), 'week') == [
        date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22),
    ]


def test_monthly_buckets_cross_year_end():
    assert period_buckets(date(2023, 11, 20), date(2024, 2, 3), 'month') == [
        date(2023, 11, 1), date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1),
    ]


def test_end_before_start_gives_no_buckets():
    assert period_buckets(date(2024, 2, 1), date(2024, 1, 1)) == []
    assert count_buckets(date(2024, 2, 1), date(2024, 1, 1), 'day') == 0


@pytest.mark.parametrize('period', ['day', 'week', 'month'])
def test_count_buckets_matches_materialised_buckets(period):
    start, end = date(2023, 12, 28), date(2024, 5, 2)
    assert count_buckets(start, end, period) == len(period_buckets(start, end, period))


def test_aware_datetimes_bucket_by_local_day():
    # 23:30 UTC on Jan 31 is already Feb 1 in Prague
    late = datetime(2024, 1, 31, 23, 30, tzinfo=dt_timezone.utc)
    assert truncate(late, 'day') == date(2024, 2, 1)


def test_unknown_period_is_rejected():
    with pytest.raises(ValidationError):
        period_buckets(date(2024, 1, 1), date(2024, 1, 2), 'year')


@pytest.mark.django_db
def test_monthly_series_fills_empty_month(world, make_result):
    make_result(created_at=at(2024, 1, 10), pathogens=[world.flu_a])
    make_result(created_at=at(2024, 1, 20), pathogens=[world.flu_a, world.rsv])
    make_result(created_at=at(2024, 3, 5), pathogens=[world.rsv])
    make_result(created_at=at(2024, 2, 14))  # negative

    filters = ReportFilter(start_date=at(2024, 1, 1, 0, 0), end_date=at(2024, 3, 1, 0, 0))
    data = positive_trends_by_pathogens(Audience.doctor(world.doctor.id), filters, 'month')

    assert data['total'] == [
        {'date': '2024-01-01', 'count': 3},
        {'date': '2024-02-01', 'count': 0},
        {'date': '2024-03-01', 'count': 0},
    ]
    assert data['byPathogen'] == [
        {'date': '2024-01-01', 'pathogenName': 'Influenza A', 'count': 2},
        {'date': '2024-01-01', 'pathogenName': 'RSV', 'count': 1},
        {'date': '2024-02-01', 'pathogenName': 'Influenza A', 'count': 0},
        {'date': '2024-02-01', 'pathogenName': 'RSV', 'count': 0},
        {'date': '2024-03-01', 'pathogenName': 'Influenza A', 'count': 0},
        {'date': '2024-03-01', 'pathogenName': 'RSV', 'count': 0},
    ]


@pytest.mark.django_db
def test_daily_series_counts_each_day(world, make_result):
    make_result(created_at=at(2024, 1, 1, 8, 0), pathogens=[world.covid])
    make_result(created_at=at(2024, 1, 3, 23, 30), pathogens=[world.covid])
    filters = ReportFilter(start_date=at(2024, 1, 1, 0, 0), end_date=at(2024, 1, 3, 23, 59))

    data = positive_trends_by_pathogens(Audience.doctor(world.doctor.id), filters, 'day')
    assert [t['count'] for t in data['total']] == [1, 0, 1]
    assert [t['date'] for t in data['total']] == ['2024-01-01', '2024-01-02', '2024-01-03']
    assert all(row['pathogenName'] for row in data['byPathogen'])


@pytest.mark.django_db
def test_weekly_series_for_all_doctors(world, make_result):
    make_result(created_at=at(2024, 1, 2), pathogens=[world.rsv])
    make_result(created_at=at(2024, 1, 4), pathogens=[world.rsv], owner=world.colleague)
    make_result(created_at=at(2024, 1, 10), pathogens=[world.flu_a], owner=world.colleague)
    filters = ReportFilter(start_date=at(2024, 1, 1, 0, 0), end_date=at(2024, 1, 14, 23, 59))

    mine = positive_trends_by_pathogens(Audience.for_doctor(world.doctor.id), filters, 'week')
    everyone = positive_trends_by_pathogens(Audience.for_doctor(None), filters, 'week')

    assert mine['total'] == [{'date': '2024-01-01', 'count': 1}, {'date': '2024-01-08', 'count': 0}]
    assert everyone['total'] == [{'date': '2024-01-01', 'count': 2}, {'date': '2024-01-08', 'count': 1}]
    assert len(everyone['byPathogen']) == 4


@pytest.mark.django_db
def test_series_without_positives_keeps_totals(world, make_result):
    make_result(created_at=at(2024, 1, 2))
    filters = ReportFilter(start_date=at(2024, 1, 1, 0, 0), end_date=at(2024, 1, 2, 23, 59))

    data = positive_trends_by_pathogens(Audience.doctor(world.doctor.id), filters)
    assert data == {
        'byPathogen': [],
        'total': [{'date': '2024-01-01', 'count': 0}, {'date': '2024-01-02', 'count': 0}],
    }


@pytest.mark.django_db
def test_series_respects_region_filter(world, make_result):
    make_result(created_at=at(2024, 1, 2), pathogens=[world.rsv], owner=world.colleague)
    make_result(created_at=at(2024, 1, 2), pathogens=[world.flu_a])
    filters = ReportFilter(region_id=world.north.id, start_date=at(2024, 1, 1, 0, 0), end_date=at(2024, 1, 2, 23, 59))

    data = positive_trends_by_pathogens(Audience.country(), filters)
    assert {row['pathogenName'] for row in data['byPathogen']} == {'RSV'}


def test_series_requires_both_dates():
    with pytest.raises(ValidationError):
        positive_trends_by_pathogens(Audience.country(), ReportFilter(start_date=at(2024, 1, 1)))
    with pytest.raises(ValidationError):
        positive_trends_by_pathogens(Audience.country(), None)


def test_series_rejects_bad_period():
    filters = ReportFilter(start_date=at(2024, 1, 1), end_date=at(2024, 1, 2))
    with pytest.raises(ValidationError):
        positive_trends_by_pathogens(Audience.country(), filters, 'quarter')


def test_series_rejects_too_many_buckets(settings):
    settings.STATISTICS_MAX_BUCKETS = 10
    filters = ReportFilter(start_date=at(2024, 1, 1), end_date=at(2024, 3, 1))
    with pytest.raises(ValidationError):
        positive_trends_by_pathogens(Audience.country(), filters, 'day')
