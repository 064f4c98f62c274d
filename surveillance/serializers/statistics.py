from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers

from surveillance.services.filters import ReportFilter
from surveillance.services.trends import PERIODS


class InstantField(serializers.Field):
    """ISO-8601 date or datetime query parameter.

    A bare date is widened to the start of the day, or to its very end
    when ``end_of_day`` is set, so that an end date includes the whole
    day.  Naive values are interpreted in the current time zone.
    """
    default_error_messages = {
        'invalid': 'Invalid date format, expected ISO-8601.',
    }

    def __init__(self, *, end_of_day=False, **kwargs):
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = str(data).strip()
        try:
            day = parse_date(value)
            if day is not None:
                parsed = datetime.combine(day, time.max if self.end_of_day else time.min)
            else:
                parsed = parse_datetime(value)
        except ValueError:
            self.fail('invalid')
        if parsed is None:
            self.fail('invalid')
        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed

    def to_representation(self, value):
        return value.isoformat()


class StatisticsQuerySerializer(serializers.Serializer):
    search = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=255, required=False, allow_blank=True)
    startDate = InstantField(required=False)
    endDate = InstantField(required=False, end_of_day=True)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and start > end:
            raise serializers.ValidationError({'startDate': 'Start date must be before end date'})
        return attrs

    def to_filter(self) -> ReportFilter:
        v = self.validated_data
        return ReportFilter(
            search=v.get('search') or None,
            city=v.get('city') or None,
            region_id=v.get('regionId'),
            city_id=v.get('cityId'),
            start_date=v.get('startDate'),
            end_date=v.get('endDate'),
        )


class GeoStatisticsQuerySerializer(StatisticsQuerySerializer):
    regionId = serializers.IntegerField(min_value=1, required=False)
    cityId = serializers.IntegerField(min_value=1, required=False)


class TrendsQuerySerializer(GeoStatisticsQuerySerializer):
    startDate = InstantField()
    endDate = InstantField(end_of_day=True)
    period = serializers.ChoiceField(choices=list(PERIODS), required=False, default='day')
    allDoctors = serializers.BooleanField(required=False, default=False)


class ScopeDistributionQuerySerializer(serializers.Serializer):
    startDate = InstantField(required=False)
    endDate = InstantField(required=False, end_of_day=True)
    regionId = serializers.IntegerField(min_value=1, required=False)
    cityId = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and start > end:
            raise serializers.ValidationError({'startDate': 'Start date must be before end date'})
        return attrs

    def to_filter(self) -> ReportFilter:
        v = self.validated_data
        return ReportFilter(start_date=v.get('startDate'), end_date=v.get('endDate'))
